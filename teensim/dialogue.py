"""Default in-memory dialogue lines for every scenario, action and response."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from teensim.emotional_state import EmotionalState
from teensim.enums import Emotion, PlayerAction, Response, Scenario
from teensim.presentation import DialogueProvider

S = Scenario

# Openings run from most negative to most positive.
OPENINGS: Dict[Scenario, List[str]] = {
    S.GO_TO_SCHOOL: [
        "I'm not going to school today. I hate it there.",
        "Do I really have to go to school? I don't feel like it.",
        "School? Already? Ugh, okay I guess...",
    ],
    S.DO_HOMEWORK: [
        "I'm NOT doing homework right now. It's stupid.",
        "Can I do my homework later? I'm tired.",
        "Yeah, I'll get to my homework soon.",
    ],
    S.CLEAN_ROOM: [
        "My room is MY space. I'll clean it when I want to!",
        "It's not even that messy. Why do you care so much?",
        "I know, I know. I'll clean it.",
    ],
    S.LIMIT_SCREEN_TIME: [
        "You can't just take away my phone! That's not fair!",
        "Come on, just a little longer? Please?",
        "Alright, I guess I've been on it a while.",
    ],
    S.BEDTIME: [
        "I'm not a kid anymore! I decide when I sleep!",
        "But I'm not even tired yet...",
        "Yeah, I'm actually pretty tired.",
    ],
    S.COME_TO_FAMILY: [
        "I don't want to hang out with the family. It's boring.",
        "Do I have to? I wanted to stay in my room.",
        "Sure, I guess I can come down.",
    ],
}

PLAYER_LINES: Dict[PlayerAction, Dict[Scenario, List[str]]] = {
    PlayerAction.AUTHORITARIAN: {
        S.GO_TO_SCHOOL: ["You're going to school, end of discussion!", "I don't care how you feel, you WILL go to school."],
        S.DO_HOMEWORK: ["Do your homework RIGHT NOW!", "No excuses. Homework. Now."],
        S.CLEAN_ROOM: ["Clean your room immediately!", "I want that room spotless in 30 minutes!"],
        S.LIMIT_SCREEN_TIME: ["Give me your phone. Now.", "Screen time is over. Hand it over."],
        S.BEDTIME: ["It's bedtime. Go to your room now.", "I said bedtime. No arguments."],
        S.COME_TO_FAMILY: ["Get out here with the family. Now.", "You're part of this family. Come out here."],
    },
    PlayerAction.EMPATHETIC: {
        S.GO_TO_SCHOOL: ["I know school can be tough. Want to talk about what's bothering you?", "I hear you. What's making school hard right now?"],
        S.DO_HOMEWORK: ["I understand you're tired. Is the homework overwhelming?", "I get it, homework isn't fun. What's making it tough today?"],
        S.CLEAN_ROOM: ["I know it feels like I'm nagging. I just want you to have a nice space.", "I understand your room is your personal space. Can we talk about it?"],
        S.LIMIT_SCREEN_TIME: ["I know your phone is important to you. But I'm worried about screen time.", "I get that you want to stay connected. Let's talk about balance."],
        S.BEDTIME: ["I know you feel grown up. But sleep is really important for you.", "I understand you're not tired yet. What's on your mind?"],
        S.COME_TO_FAMILY: ["I understand you want alone time. But we'd love to spend time with you.", "I know family time might not seem fun, but we miss you."],
    },
    PlayerAction.LOGICAL: {
        S.GO_TO_SCHOOL: ["Education is important for your future. Missing school hurts your grades.", "School attendance affects your academic record."],
        S.DO_HOMEWORK: ["Homework reinforces what you learned. It helps you remember.", "Your grades depend on completing homework consistently."],
        S.CLEAN_ROOM: ["A clean space helps you focus and find things easier.", "Clutter can affect your mental health and productivity."],
        S.LIMIT_SCREEN_TIME: ["Too much screen time affects your sleep and health.", "Studies show excessive phone use impacts concentration."],
        S.BEDTIME: ["Teenagers need 8-10 hours of sleep for development.", "Lack of sleep affects your mood, health, and school performance."],
        S.COME_TO_FAMILY: ["Family connections are important. Strong relationships matter.", "Spending time together strengthens family bonds."],
    },
    PlayerAction.BRIBERY: {
        S.GO_TO_SCHOOL: ["If you go to school, I'll get you that game you wanted.", "Go to school today and we'll go out for your favorite food."],
        S.DO_HOMEWORK: ["Finish your homework and you can have extra screen time.", "Do your homework now and I'll give you $20."],
        S.CLEAN_ROOM: ["Clean your room and I'll increase your allowance.", "If you clean up, I'll buy you something nice."],
        S.LIMIT_SCREEN_TIME: ["Put the phone away and I'll take you shopping tomorrow.", "Give me an hour of family time and you can have it back."],
        S.BEDTIME: ["Go to bed now and you can sleep in Saturday.", "Sleep early tonight and I'll make your favorite breakfast."],
        S.COME_TO_FAMILY: ["Come hang with us and I'll give you extra allowance.", "Join us for dinner and I'll let you choose the movie."],
    },
    PlayerAction.GUILT_TRIP: {
        S.GO_TO_SCHOOL: ["After all I do for you, you can't even go to school?", "I work so hard to give you opportunities, and this is how you repay me?"],
        S.DO_HOMEWORK: ["I sacrifice so much for your education and you won't do homework?", "Do you know how disappointed I am in you right now?"],
        S.CLEAN_ROOM: ["I do everything around here and you can't even clean your room?", "You're so ungrateful. I keep this house nice for you."],
        S.LIMIT_SCREEN_TIME: ["I pay for that phone and you can't respect simple rules?", "You're addicted. You're breaking my heart with this behavior."],
        S.BEDTIME: ["You're going to make yourself sick and I'll have to take care of you.", "Why do you fight me on everything? I'm trying to help you."],
        S.COME_TO_FAMILY: ["You never want to spend time with us anymore. Are you ashamed of your family?", "We used to be close. What happened to you?"],
    },
    PlayerAction.LISTEN: {
        S.GO_TO_SCHOOL: ["Tell me what's really going on. Why don't you want to go?", "I'm here to listen. What's happening at school?"],
        S.DO_HOMEWORK: ["Talk to me. What's making homework difficult right now?", "I want to understand. What's going on with your assignments?"],
        S.CLEAN_ROOM: ["Help me understand your perspective on this.", "I'm listening. Why is cleaning your room such an issue?"],
        S.LIMIT_SCREEN_TIME: ["I want to hear your side. Why is this so important to you?", "Tell me what you're doing that's so important on your phone."],
        S.BEDTIME: ["What's keeping you up? Let's talk about it.", "I'm listening. Why don't you want to sleep?"],
        S.COME_TO_FAMILY: ["Talk to me. Why don't you want to join us?", "I want to understand. What would make family time better for you?"],
    },
    PlayerAction.COMPROMISE: {
        S.GO_TO_SCHOOL: ["How about you go to school, and we'll talk tonight about what's bothering you?", "What if you go today, and if it's still bad tomorrow, we'll figure something out?"],
        S.DO_HOMEWORK: ["What if you do half now and half after dinner?", "How about you take a 30-minute break, then tackle the homework?"],
        S.CLEAN_ROOM: ["What if we clean it together? I'll help you.", "How about you just pick up the floor today, and organize tomorrow?"],
        S.LIMIT_SCREEN_TIME: ["Let's set a time together. When do you think is reasonable?", "What if we agree on 30 more minutes, then phone away?"],
        S.BEDTIME: ["How about lights off in 30 minutes? Does that work?", "What if you read in bed for a bit, then sleep?"],
        S.COME_TO_FAMILY: ["Just come for dinner, then you can go back to your room?", "What if you join us for one hour? That's all I ask."],
    },
}

TEEN_LINES: Dict[Response, Dict[Scenario, List[str]]] = {
    Response.COMPLIANT: {
        S.GO_TO_SCHOOL: ["Okay, I'll go to school.", "Fine, you're right. I'll get ready."],
        S.DO_HOMEWORK: ["Alright, I'll do my homework.", "Okay, let me get started on it."],
        S.CLEAN_ROOM: ["Fine, I'll clean my room.", "Okay, I'll clean it up now."],
        S.LIMIT_SCREEN_TIME: ["Okay, here's my phone.", "You're right. I'll put it away."],
        S.BEDTIME: ["Alright, I'll go to bed.", "Okay, goodnight."],
        S.COME_TO_FAMILY: ["Okay, I'll come out.", "Fine, I'll join you guys."],
    },
    Response.NEGOTIATE_CALM: {
        S.GO_TO_SCHOOL: ["Can we talk about this? There's something going on...", "What if I stay home today and make it up?"],
        S.DO_HOMEWORK: ["Can I please do it after dinner? I need a break.", "What if I do the important parts first?"],
        S.CLEAN_ROOM: ["Can I do it this weekend instead?", "What if I just organize the important stuff?"],
        S.LIMIT_SCREEN_TIME: ["Can I have 20 more minutes? I'm in the middle of something.", "What if I set a timer myself?"],
        S.BEDTIME: ["Can I at least finish this episode?", "What if I go to bed 30 minutes later on weekends?"],
        S.COME_TO_FAMILY: ["Can I come out in a few minutes?", "What if I join for part of it?"],
    },
    Response.SARCASTIC: {
        S.GO_TO_SCHOOL: ["Oh sure, school, the best place on Earth...", "Yeah, can't wait to go to that amazing place..."],
        S.DO_HOMEWORK: ["Oh wow, homework, my favorite thing ever.", "Sure, because homework is SO important right this second."],
        S.CLEAN_ROOM: ["Oh no, the room police are here!", "Right, because a messy room is the end of the world."],
        S.LIMIT_SCREEN_TIME: ["Sure, take away the only thing I enjoy.", "Oh great, the phone police strike again."],
        S.BEDTIME: ["Yes, master, whatever you say...", "Right, because I'm five years old."],
        S.COME_TO_FAMILY: ["Oh boy, family fun time...", "Yeah, that sounds absolutely thrilling."],
    },
    Response.ANGRY: {
        S.GO_TO_SCHOOL: ["I SAID I'm not going! Leave me alone!", "You don't understand anything! I hate school!"],
        S.DO_HOMEWORK: ["Stop nagging me! I'll do it when I want to!", "Get off my back! I'm sick of this!"],
        S.CLEAN_ROOM: ["It's MY room! Get out!", "Why do you always have to control everything?!"],
        S.LIMIT_SCREEN_TIME: ["This is ridiculous! You're so unfair!", "I can't believe this! You're the worst!"],
        S.BEDTIME: ["Stop treating me like a child!", "I'm not tired! Leave me alone!"],
        S.COME_TO_FAMILY: ["I don't want to! Stop forcing me!", "Why can't you just leave me alone?!"],
    },
    Response.DISMISSIVE: {
        S.GO_TO_SCHOOL: ["Yeah, yeah, I heard you.", "Mmm hmm, sure..."],
        S.DO_HOMEWORK: ["Whatever, I'll do it later.", "Yeah, okay, sure..."],
        S.CLEAN_ROOM: ["Uh huh, later.", "Yeah, I know..."],
        S.LIMIT_SCREEN_TIME: ["In a minute...", "Sure, whatever..."],
        S.BEDTIME: ["Yeah, soon...", "Okay, okay..."],
        S.COME_TO_FAMILY: ["Maybe later...", "Yeah, in a bit..."],
    },
    Response.EMOTIONAL_PLEAD: {
        S.GO_TO_SCHOOL: ["Please don't make me go... I'm really struggling there...", "I'm begging you, I can't face school today..."],
        S.DO_HOMEWORK: ["I'm so overwhelmed... I can't handle it right now...", "Please, I'm so stressed about everything..."],
        S.CLEAN_ROOM: ["I'm too tired... Please...", "I just... I can't deal with this right now..."],
        S.LIMIT_SCREEN_TIME: ["Please, this is the only thing that helps me relax...", "Don't take this away from me... Please..."],
        S.BEDTIME: ["I can't sleep anyway... My mind won't stop...", "Please, I'm anxious... I need to stay up..."],
        S.COME_TO_FAMILY: ["I really need to be alone right now... Please understand...", "I just can't... I need space..."],
    },
    Response.DEFIANT: {
        S.GO_TO_SCHOOL: ["No. I'm not going and you can't force me.", "Make me. Go ahead, try."],
        S.DO_HOMEWORK: ["I'm not doing it. Deal with it.", "You can't make me do homework."],
        S.CLEAN_ROOM: ["I'm not cleaning it. It's my space.", "No. You have no right to tell me what to do in my room."],
        S.LIMIT_SCREEN_TIME: ["No. It's my phone, I'll use it how I want.", "You can't control me."],
        S.BEDTIME: ["I'll sleep when I'm ready. You can't force me.", "I'm not a kid. I don't have a bedtime."],
        S.COME_TO_FAMILY: ["I'm not coming out. You can't make me.", "No. I don't want to and I won't."],
    },
    Response.REASONABLE_REFUSAL: {
        S.GO_TO_SCHOOL: ["I understand, but I have a legitimate reason. Can we discuss it?", "I hear you, but something serious is going on. Let's talk."],
        S.DO_HOMEWORK: ["I get it, but I have a plan. I'll finish it by the deadline.", "I understand it's important, but I need to prioritize this other assignment first."],
        S.CLEAN_ROOM: ["I understand your concern, but I have a system. It's organized to me.", "Fair point, but can I clean it this weekend when I have more time?"],
        S.LIMIT_SCREEN_TIME: ["I understand your concern. Can we set a specific time limit together?", "I hear you. What if I track my own time and we review it?"],
        S.BEDTIME: ["I understand sleep is important, but I'm legitimately not tired yet. Can we compromise?", "I get it, but my sleep schedule is different. Can we work something out?"],
        S.COME_TO_FAMILY: ["I understand you want family time. Can I join after I finish this important thing?", "I hear you. What if we schedule regular family time I can plan for?"],
    },
}

GENERIC_RESPONSES: Dict[Response, str] = {
    Response.COMPLIANT: "Okay, fine. I'll do it.",
    Response.ANGRY: "I can't believe this! Leave me alone!",
    Response.DEFIANT: "No. You can't make me.",
}
GENERIC_FALLBACK = "Whatever..."
GENERIC_PLAYER_LINE = "Let's talk about this."


class DialogueDatabase(DialogueProvider):
    """Lookup tables of canned lines with a seedable random choice."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        openings: Optional[Dict[Scenario, List[str]]] = None,
        player_lines: Optional[Dict[PlayerAction, Dict[Scenario, List[str]]]] = None,
        teen_lines: Optional[Dict[Response, Dict[Scenario, List[str]]]] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._openings = openings if openings is not None else OPENINGS
        self._player_lines = player_lines if player_lines is not None else PLAYER_LINES
        self._teen_lines = teen_lines if teen_lines is not None else TEEN_LINES

    def opening(self, scenario: Scenario, state: EmotionalState) -> str:
        options = self._openings.get(scenario)
        if not options:
            return "..."
        if state.mood < -40:
            return options[0]
        if state.mood > 40:
            return options[-1]
        return options[len(options) // 2]

    def response(self, scenario: Scenario, response: Response, emotion: Emotion) -> str:
        options = self._teen_lines.get(response, {}).get(scenario)
        if options:
            return self._pick(options)
        return GENERIC_RESPONSES.get(response, GENERIC_FALLBACK)

    def player_line(self, scenario: Scenario, action: PlayerAction) -> str:
        options = self._player_lines.get(action, {}).get(scenario)
        if options:
            return self._pick(options)
        return GENERIC_PLAYER_LINE

    def _pick(self, options: Sequence[str]) -> str:
        return options[self._rng.randrange(len(options))]
