"""Short readings for each body's astrocartography lines."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

__all__ = [
    "LINE_INTERPRETATIONS",
    "UNKNOWN_INTERPRETATION",
    "line_interpretation",
]

UNKNOWN_INTERPRETATION = "Interpretation not available."

LINE_INTERPRETATIONS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "Sun": MappingProxyType(
            {
                "rise": "Places where your identity and self-expression are emphasized. You shine brightly and are noticed.",
                "set": "Locations where partnerships and relationships with others help you grow and shine.",
                "culminate": "Areas where career success, public recognition, and leadership opportunities are heightened.",
                "anticulminate": "Regions where you feel at home, connected to roots, and can recharge your vitality.",
            }
        ),
        "Moon": MappingProxyType(
            {
                "rise": "Locations where emotions are close to the surface. You feel sensitive and intuitive.",
                "set": "Places where emotional connections in relationships are deepened.",
                "culminate": "Areas where career in nurturing, public service, or emotional work is favored.",
                "anticulminate": "Regions that feel like home, where family and domestic life are most fulfilling.",
            }
        ),
        "Mercury": MappingProxyType(
            {
                "rise": "Places where communication, learning, and mental activity are heightened.",
                "set": "Locations where intellectual partnerships and stimulating conversations flourish.",
                "culminate": "Areas favorable for careers in writing, teaching, media, or communication.",
                "anticulminate": "Regions where study, writing, and intellectual pursuits feel natural.",
            }
        ),
        "Venus": MappingProxyType(
            {
                "rise": "Locations where charm, beauty, and social grace are enhanced.",
                "set": "Places where love, romance, and harmonious partnerships are favored.",
                "culminate": "Areas where careers in art, beauty, diplomacy, or entertainment thrive.",
                "anticulminate": "Regions where comfort, pleasure, and aesthetic beauty in the home are emphasized.",
            }
        ),
        "Mars": MappingProxyType(
            {
                "rise": "Places where energy, assertiveness, and courage are amplified.",
                "set": "Locations where passionate, dynamic relationships and conflicts may arise.",
                "culminate": "Areas where ambitious career pursuits and competitive success are favored.",
                "anticulminate": "Regions where active home life or property development are emphasized.",
            }
        ),
        "Jupiter": MappingProxyType(
            {
                "rise": "Locations where optimism, growth, and opportunities are abundant.",
                "set": "Places where relationships bring expansion, learning, and good fortune.",
                "culminate": "Areas where career success, recognition, and advancement are highlighted.",
                "anticulminate": "Regions where a sense of abundance and philosophical grounding is felt.",
            }
        ),
        "Saturn": MappingProxyType(
            {
                "rise": "Places where discipline, responsibility, and hard work are required.",
                "set": "Locations where serious, committed relationships and partnerships form.",
                "culminate": "Areas where career requires persistence but brings lasting achievement.",
                "anticulminate": "Regions where establishing foundations and dealing with family karma occur.",
            }
        ),
        "Uranus": MappingProxyType(
            {
                "rise": "Locations where sudden changes, innovation, and independence are highlighted.",
                "set": "Places where unusual, exciting, or unpredictable relationships occur.",
                "culminate": "Areas where unconventional careers and sudden opportunities arise.",
                "anticulminate": "Regions where home life is unconventional or experiences sudden changes.",
            }
        ),
        "Neptune": MappingProxyType(
            {
                "rise": "Places where imagination, spirituality, and idealism are enhanced.",
                "set": "Locations where spiritual or idealistic relationships form, but clarity may be lacking.",
                "culminate": "Areas where careers in arts, healing, or spirituality are favored.",
                "anticulminate": "Regions where a deep spiritual connection or sense of transcendence is felt.",
            }
        ),
        "Pluto": MappingProxyType(
            {
                "rise": "Locations where transformation, intensity, and personal power are emphasized.",
                "set": "Places where deep, transformative, and intense relationships occur.",
                "culminate": "Areas where career involves power, transformation, or dealing with crises.",
                "anticulminate": "Regions where deep psychological work and ancestral healing occur.",
            }
        ),
        "North Node": MappingProxyType(
            {
                "rise": "Places where destiny and life purpose are activated.",
                "set": "Locations where karmic relationships that promote growth occur.",
                "culminate": "Areas where career aligns with soul purpose and destiny.",
                "anticulminate": "Regions where family karma and ancestral patterns can be resolved.",
            }
        ),
        "South Node": MappingProxyType(
            {
                "rise": "Places where past-life patterns and old habits are strong.",
                "set": "Locations where familiar but potentially limiting relationships occur.",
                "culminate": "Areas where career draws on past-life skills but may feel limiting.",
                "anticulminate": "Regions where ancestral patterns and comfort zones are emphasized.",
            }
        ),
        "Chiron": MappingProxyType(
            {
                "rise": "Locations where healing wounds and mentoring others are highlighted.",
                "set": "Places where relationships involve healing or trigger old wounds.",
                "culminate": "Areas where careers in healing, teaching, or counseling are favored.",
                "anticulminate": "Regions where family wounds can be healed and wisdom gained.",
            }
        ),
    }
)

# Angle names used by chart software for the same four lines.
_ANGLE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "ascendant": "rise",
        "asc": "rise",
        "descendant": "set",
        "dsc": "set",
        "mc": "culminate",
        "midheaven": "culminate",
        "ic": "anticulminate",
        "imum_coeli": "anticulminate",
    }
)


def _body_label(body: str) -> str:
    return body.replace("_", " ").strip().title()


def line_interpretation(body: str, line_type: str) -> str:
    """Return the reading for ``body``'s ``line_type`` line.

    Body keys such as ``"NORTH_NODE"`` and angle names such as ``"mc"`` are
    accepted; unknown combinations yield :data:`UNKNOWN_INTERPRETATION`.
    """

    kind = line_type.strip().lower()
    kind = _ANGLE_ALIASES.get(kind, kind)
    readings = LINE_INTERPRETATIONS.get(_body_label(body))
    if readings is None:
        return UNKNOWN_INTERPRETATION
    return readings.get(kind, UNKNOWN_INTERPRETATION)
