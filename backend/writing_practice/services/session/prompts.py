import random
from typing import Optional, Sequence

from .errors import InvalidPromptError

EMPTY_PROMPT_MESSAGE = "Please enter a prompt to continue."

# Practice prompts only; not drawn from any official question bank.
PROMPTS = (
    "Describe a time you changed your mind about something important. What led to the change, and what did you learn about how you form opinions?",
    "Tell us about a challenge you faced in a team. How did you contribute to resolving it, and what would you do differently next time?",
    "What is a problem in your community that you would like to help solve? Explain why it matters to you and one concrete step you could take.",
    "Reflect on a failure or setback. How did you respond, and how has it shaped the way you approach new goals?",
    "Describe an experience outside the classroom that taught you something you could not have learned from a textbook.",
    "Which person has most influenced the way you think? Describe one specific moment that shows their influence.",
    "Tell us about something you are curious about and how you have explored that curiosity on your own.",
    "Describe a time you had to balance competing responsibilities. How did you decide what to prioritise?",
    "What does leadership mean to you? Use an example from your own life where you led, or chose not to lead.",
    "Write about a belief or tradition that matters to you. How do you respond when others see it differently?",
    "Describe a skill you worked hard to develop. What kept you going when progress was slow?",
    "If you could change one thing about how students learn, what would it be and why?",
)


class PromptSource:
    def __init__(self, prompts: Sequence[str] = PROMPTS, rng: Optional[random.Random] = None):
        if not prompts:
            raise ValueError('prompt bank is empty')
        self.prompts = tuple(prompts)
        self.rng = rng or random.Random()

    def get_random_prompt(self) -> str:
        return self.rng.choice(self.prompts)


def validate_custom_prompt(text) -> str:
    """Trimmed custom prompt; raises InvalidPromptError when nothing is left."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidPromptError(EMPTY_PROMPT_MESSAGE)
    return text.strip()
