import math

# star glyphs, dimmest to brightest
STAR_DOT = '.'
STAR_PLUS = '+'
STAR_BRIGHT = '*'
EMPTY = ' '

_FNV_OFFSET = 1469598103
_FNV_PRIME = 16777619
_MIX_X = 374761393
_MIX_Y = 668265263
_MASK32 = 0xFFFFFFFF

# density tiers on the low 16 bits of the hash
DOT_TIER = 12000
PLUS_TIER = 16000
BRIGHT_TIER = 16800


def star_hash(x, y):
    """Deterministic 32-bit FNV-style mix of the pixel coordinates."""
    h = _FNV_OFFSET ^ ((x * _MIX_X + y * _MIX_Y) & _MASK32)
    return (h * _FNV_PRIME) & _MASK32


def star_tier(x, y):
    return star_hash(x, y) & 0xFFFF


def sky_symbol(x, y, phase):
    """
    Background glyph for a sky pixel.

    Placement depends only on (x, y); the two sparser tiers twinkle with a
    per-star offset taken from the hash, so no per-star state is kept.
    """
    h = star_hash(x, y)
    r = h & 0xFFFF
    if r < DOT_TIER:
        return STAR_DOT
    if r < PLUS_TIER:
        tw = math.sin(phase * 0.60 + ((h >> 8) & 1023) * (2.0 * math.pi / 1024.0))
        return STAR_BRIGHT if tw > 0.92 else STAR_PLUS
    if r < BRIGHT_TIER:
        tw = math.sin(phase * 0.75 + (h & 1023) * (2.0 * math.pi / 1024.0))
        return STAR_BRIGHT if tw > 0.10 else STAR_PLUS
    return EMPTY
