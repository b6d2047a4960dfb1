from __future__ import annotations

from enum import IntEnum
from typing import Final


class BookType(IntEnum):
    """Workbook container kinds."""

    XLS = 0
    XLSX = 1


class CellType(IntEnum):
    """Cell content kinds reported by the engine."""

    EMPTY = 0
    NUMBER = 1
    STRING = 2
    BOOLEAN = 3
    BLANK = 4
    ERROR = 5


class AlignH(IntEnum):
    GENERAL = 0
    LEFT = 1
    CENTER = 2
    RIGHT = 3
    FILL = 4
    JUSTIFY = 5
    MERGE = 6
    DISTRIBUTED = 7


class AlignV(IntEnum):
    TOP = 0
    CENTER = 1
    BOTTOM = 2
    JUSTIFY = 3
    DISTRIBUTED = 4


class FillPattern(IntEnum):
    NONE = 0
    SOLID = 1
    GRAY50 = 2
    GRAY75 = 3
    GRAY25 = 4
    HORSTRIPE = 5
    VERSTRIPE = 6
    REVDIAGSTRIPE = 7
    DIAGSTRIPE = 8
    DIAGCROSSHATCH = 9
    THICKDIAGCROSSHATCH = 10
    THINHORSTRIPE = 11
    THINVERSTRIPE = 12
    THINREVDIAGSTRIPE = 13
    THINDIAGSTRIPE = 14
    THINHORCROSSHATCH = 15
    THINDIAGCROSSHATCH = 16
    GRAY12P5 = 17
    GRAY6P25 = 18


class Color(IntEnum):
    """Palette colors; 8..63 are the indexed palette entries."""

    BLACK = 8
    WHITE = 9
    RED = 10
    BRIGHTGREEN = 11
    BLUE = 12
    YELLOW = 13
    PINK = 14
    TURQUOISE = 15
    DARKRED = 16
    GREEN = 17
    DARKBLUE = 18
    DARKYELLOW = 19
    VIOLET = 20
    TEAL = 21
    GRAY25 = 22
    GRAY50 = 23
    PERIWINKLE_CF = 24
    PLUM_CF = 25
    IVORY_CF = 26
    LIGHTTURQUOISE_CF = 27
    DARKPURPLE_CF = 28
    CORAL_CF = 29
    OCEANBLUE_CF = 30
    ICEBLUE_CF = 31
    DARKBLUE_CL = 32
    PINK_CL = 33
    YELLOW_CL = 34
    TURQUOISE_CL = 35
    VIOLET_CL = 36
    DARKRED_CL = 37
    TEAL_CL = 38
    BLUE_CL = 39
    SKYBLUE = 40
    LIGHTTURQUOISE = 41
    LIGHTGREEN = 42
    LIGHTYELLOW = 43
    PALEBLUE = 44
    ROSE = 45
    LAVENDER = 46
    TAN = 47
    LIGHTBLUE = 48
    AQUA = 49
    LIME = 50
    GOLD = 51
    LIGHTORANGE = 52
    ORANGE = 53
    BLUEGRAY = 54
    GRAY40 = 55
    DARKTEAL = 56
    SEAGREEN = 57
    DARKGREEN = 58
    OLIVEGREEN = 59
    BROWN = 60
    PLUM = 61
    INDIGO = 62
    GRAY80 = 63
    DEFAULT_FOREGROUND = 0x40
    DEFAULT_BACKGROUND = 0x41
    TOOLTIP = 0x51
    AUTO = 0x7FFF


class NumFormat(IntEnum):
    """Built-in number format ids."""

    GENERAL = 0
    NUMBER = 1
    NUMBER_D2 = 2
    NUMBER_SEP = 3
    NUMBER_SEP_D2 = 4
    CURRENCY_NEGBRA = 5
    CURRENCY_NEGBRARED = 6
    CURRENCY_D2_NEGBRA = 7
    CURRENCY_D2_NEGBRARED = 8
    PERCENT = 9
    PERCENT_D2 = 10
    SCIENTIFIC_D2 = 11
    FRACTION_ONEDIG = 12
    FRACTION_TWODIG = 13
    DATE = 14
    CUSTOM_D_MON_YY = 15
    CUSTOM_D_MON = 16
    CUSTOM_MON_YY = 17
    CUSTOM_HMM_AM = 18
    CUSTOM_HMMSS_AM = 19
    CUSTOM_HMM = 20
    CUSTOM_HMMSS = 21
    CUSTOM_MDYYYY_HMM = 22
    NUMBER_SEP_NEGBRA = 37
    NUMBER_SEP_NEGBRARED = 38
    NUMBER_D2_SEP_NEGBRA = 39
    NUMBER_D2_SEP_NEGBRARED = 40
    ACCOUNT = 41
    ACCOUNTCUR = 42
    ACCOUNT_D2 = 43
    ACCOUNT_D2_CUR = 44
    CUSTOM_MMSS = 45
    CUSTOM_H0MMSS = 46
    CUSTOM_MMSS0 = 47
    CUSTOM_000P0E_PLUS0 = 48
    TEXT = 49


CONSTANT_PREFIXES: Final[dict[type[IntEnum], str]] = {
    BookType: "BOOK_TYPE_",
    CellType: "CELLTYPE_",
    AlignH: "ALIGNH_",
    AlignV: "ALIGNV_",
    FillPattern: "FILLPATTERN_",
    Color: "COLOR_",
    NumFormat: "NUMFORMAT_",
}


def flat_constants() -> dict[str, int]:
    """Return every enumeration member under its flat exported name.

    Returns:
        Mapping such as ``{"ALIGNH_CENTER": 2, "COLOR_GREEN": 17, ...}``.
    """
    flat: dict[str, int] = {}
    for enum_cls, prefix in CONSTANT_PREFIXES.items():
        for member in enum_cls:
            flat[f"{prefix}{member.name}"] = int(member)
    return flat


__all__ = [
    "AlignH",
    "AlignV",
    "BookType",
    "CellType",
    "Color",
    "FillPattern",
    "NumFormat",
    "flat_constants",
]
