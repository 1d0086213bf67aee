from __future__ import annotations

"""Window name generation utilities.

Implements the Adjective–Noun alliteration scheme: window 0 is "Able Ant",
window 1 is "Blue Bear", and so on through the alphabet. Each letter carries
five word variants; every full pass through the alphabet (a *cycle*) advances
to the next variant and wraps once all five are used.

The mapping is deterministic for a given integer index so the same window
position yields the same default name across reloads.
"""

import string
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Tuple

ALPHABET: str = string.ascii_lowercase

_ADJECTIVES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "a": ("Able", "Active", "Angry", "Alert", "Azure"),
        "b": ("Blue", "Brave", "Busy", "Bold", "Bright"),
        "c": ("Calm", "Cool", "Clean", "Crazy", "Chief"),
        "d": ("Dark", "Dear", "Deep", "Direct", "Dizzy"),
        "e": ("Eager", "Early", "Easy", "Elite", "Empty"),
        "f": ("Fair", "Fast", "Fine", "Firm", "Flat"),
        "g": ("Glad", "Good", "Grand", "Great", "Green"),
        "h": ("Happy", "Hard", "Heavy", "High", "Huge"),
        "i": ("Icy", "Ideal", "Idle", "Ill", "Inner"),
        "j": ("Jolly", "Just", "Juicy", "Joyful", "Jazzy"),
        "k": ("Keen", "Kind", "Known", "Key", "King"),
        "l": ("Late", "Lean", "Left", "Light", "Live"),
        "m": ("Mad", "Main", "Major", "Mean", "Mild"),
        "n": ("Near", "Neat", "New", "Nice", "Next"),
        "o": ("Odd", "Old", "Open", "Orange", "Outer"),
        "p": ("Pale", "Past", "Pink", "Plain", "Poor"),
        "q": ("Quick", "Quiet", "Queen", "Quaint", "Quirky"),
        "r": ("Rare", "Ready", "Real", "Red", "Rich"),
        "s": ("Sad", "Safe", "Salt", "Same", "Soft"),
        "t": ("Tall", "Tame", "Tart", "Thin", "Tidy"),
        "u": ("Ugly", "Ultra", "Union", "Upper", "Urban"),
        "v": ("Vain", "Vast", "Very", "Vivid", "Vital"),
        "w": ("Warm", "Weak", "Wet", "Wide", "Wild"),
        # Few real X adjectives; a mix keeps the initial consistent.
        "x": ("Xenial", "Xeric", "Xray", "Xylo", "Xenon"),
        "y": ("Yellow", "Young", "Yummy", "Yearly", "Yoga"),
        "z": ("Zany", "Zealous", "Zero", "Zesty", "Zinc"),
    }
)

_NOUNS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "a": ("Ant", "Apple", "Arm", "Art", "Arch"),
        "b": ("Bear", "Ball", "Bird", "Boat", "Box"),
        "c": ("Cat", "Car", "Cake", "Cup", "Coat"),
        "d": ("Dog", "Door", "Desk", "Duck", "Drum"),
        "e": ("Egg", "Ear", "Eye", "Eel", "Elf"),
        "f": ("Fan", "Fish", "Fork", "Fox", "Frog"),
        "g": ("Goat", "Game", "Gate", "Gem", "Gift"),
        "h": ("Hat", "Hen", "Hill", "Home", "Horse"),
        "i": ("Ice", "Ink", "Iron", "Idea", "Image"),
        "j": ("Jar", "Jam", "Jet", "Job", "Joke"),
        "k": ("Key", "Kite", "King", "Kid", "Knee"),
        "l": ("Lamp", "Leaf", "Leg", "Lion", "Lock"),
        "m": ("Map", "Man", "Moon", "Mouse", "Mug"),
        "n": ("Net", "Nail", "Name", "Neck", "Note"),
        "o": ("Owl", "Oil", "Ox", "Oven", "Onion"),
        "p": ("Pen", "Pan", "Pig", "Pin", "Pot"),
        "q": ("Queen", "Quiz", "Quail", "Quilt", "Quart"),
        "r": ("Rat", "Ring", "Road", "Rock", "Rose"),
        "s": ("Sun", "Ship", "Shoe", "Shop", "Star"),
        "t": ("Toy", "Tea", "Tent", "Tie", "Top"),
        "u": ("Unit", "Urn", "User", "Uncle", "Usage"),
        "v": ("Van", "Vase", "Vest", "Vine", "View"),
        "w": ("Wolf", "Wall", "Way", "Web", "Wind"),
        "x": ("Xray", "Xylophone", "Xenon", "Xerus", "Xylograph"),
        "y": ("Yak", "Yam", "Yard", "Year", "Yoyo"),
        "z": ("Zebra", "Zoo", "Zone", "Zero", "Zip"),
    }
)


def generate_window_name(index: int) -> str:
    """Return the default display name for the window at position `index`.

    Index 0 -> "Able Ant", index 1 -> "Blue Bear", index 26 -> "Active Apple".
    Word variants wrap independently per list, so the function is defined for
    every non-negative index and repeats with a period of 26 * 5 = 130.
    """

    letter = ALPHABET[index % len(ALPHABET)]
    cycle = index // len(ALPHABET)
    adjectives = _ADJECTIVES[letter]
    nouns = _NOUNS[letter]
    adjective = adjectives[cycle % len(adjectives)]
    noun = nouns[cycle % len(nouns)]
    return f"{adjective} {noun}"


def generate_window_names(window_ids: Sequence[str]) -> Dict[str, str]:
    """Map each window id to the generated name for its position.

    The input order is trusted as the logical "1st, 2nd, 3rd" window order
    reported by the browser. A repeated id keeps the name of its last position.
    """

    names: Dict[str, str] = {}
    for index, window_id in enumerate(window_ids):
        names[window_id] = generate_window_name(index)
    return names


__all__ = [
    "ALPHABET",
    "generate_window_name",
    "generate_window_names",
]
