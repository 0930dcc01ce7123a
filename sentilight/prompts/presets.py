"""
Preset lighting scenes.

Each preset is the argument set for MoodController.send_preset().
"""

PRESETS = {
    "relax": {
        "hsbcolor": "30,60,60",
        "dimmer": 50,
        "ct": 400,
        "description": "Soft amber for winding down",
    },
    "focus": {
        "hsbcolor": "200,20,100",
        "dimmer": 100,
        "ct": 200,
        "description": "Cool, bright white-blue for concentration",
    },
    "energize": {
        "hsbcolor": "60,100,100",
        "dimmer": 70,
        "ct": 250,
        "description": "Bright warm yellow",
    },
    "night": {
        "hsbcolor": "20,90,15",
        "dimmer": 10,
        "ct": 500,
        "description": "Very dim orange night light",
    },
}


def get_preset(name):
    """Look up a preset by name (case-insensitive), or None."""
    if not name:
        return None
    return PRESETS.get(name.strip().lower())
