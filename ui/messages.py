import random
from typing import Optional

MOTIVATIONAL_QUOTES = [
    "The journey of a thousand miles begins with one step.",
    "Progress, not perfection, is the goal.",
    "Every moment is a fresh beginning.",
    "You are capable of amazing things.",
    "Balance is not better time management, but better boundary management.",
    "Small steps every day lead to big changes.",
    "Your only limit is you.",
    "Believe you can and you're halfway there.",
]

WELCOME_QUOTES = [
    "Balance is not better time management, it's better boundary management.",
    "Progress, not perfection, is the goal.",
    "Your body is a temple, but only if you treat it right.",
    "Happiness is found when you stop comparing yourself to other people.",
    "The greatest wealth is health.",
    "Take care of your body. It's the only place you have to live.",
    "Self-care is not selfish.",
    "You are capable of amazing things.",
    "Drink water, be happy, live fully.",
    "Every moment is a fresh beginning.",
    "Small steps lead to big changes.",
    "You've got this! 💪",
    "Your wellness journey starts now!",
    "Breathe. You're doing great.",
    "Mind, body, and soul in harmony.",
    "Success is a journey, not a destination.",
]


def quote_seen_key(user_id: Optional[str], day: str) -> str:
    return f"quote_seen_{user_id}_{day}"


def get_greeting(hour: int) -> str:
    if hour < 12:
        return 'Good Morning'
    if hour < 17:
        return 'Good Afternoon'
    return 'Good Evening'


def random_quote() -> str:
    return random.choice(MOTIVATIONAL_QUOTES)


def welcome_screen(name: str) -> dict:
    """Экран с цитатой, который показывается один раз в день"""
    return {
        'title': f"Welcome back, {name}! ✨",
        'quote': random.choice(WELCOME_QUOTES),
        'subtitle': "Let's start your wellness journey! 🌟",
    }
