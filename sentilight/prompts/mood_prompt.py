"""
Mood prompt for Gemini command generation.

Asks the model to answer with exactly one [COMMAND: ...] block holding a
Tasmota HSBCOLOR/Dimmer/CT combination and one [EXPLANATION: ...] block.
"""


def get_mood_prompt(mood_text):
    """
    Build the single-turn prompt for a mood description.

    Args:
        mood_text: What the user said about how they feel

    Returns:
        Complete prompt string
    """
    return (
        f"User mood: '{mood_text}'. Convert this into a Tasmota bulb control command. "
        "Output the result only in the form "
        "[COMMAND: HSBCOLOR hue,saturation,brightness;Dimmer value;CT temperature] "
        "using exactly these three commands combined, "
        "followed only by [EXPLANATION: a short description of the mood change]. "
        "(hue:0-359, saturation/brightness:0-100, Dimmer:0-100, CT:153-500). "
        "Example: [COMMAND: HSBCOLOR 60,100,100;Dimmer 70;CT 250] "
        "[EXPLANATION: A bright, warm yellow to give you energy.]"
    )
