"""Environment-driven settings.

Call ``dotenv.load_dotenv()`` at the entry point before ``load_settings()`` so
that a local ``.env`` file is honoured.
"""

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from salattimes.methods import parameters_for
from salattimes.models import CalculationParameters, HighLatitudeRule, Madhab, Shafaq

E = TypeVar("E", bound=Enum)

_MADHAB_ALIASES = {"1": Madhab.SHAFI, "standard": Madhab.SHAFI, "2": Madhab.HANAFI}


def _normalize(raw: str) -> str:
    return raw.strip().lower().replace("_", "").replace("-", "").replace("the", "")


def parse_enum(enum_cls: type[E], raw: str) -> E:
    """Case- and separator-insensitive lookup by value or member name.

    ``"middleOfNight"``, ``"MIDDLE_OF_THE_NIGHT"`` and ``"middleofthenight"``
    all resolve to the same member.

    Raises:
        ValueError: No member matches.
    """
    wanted = _normalize(raw)
    for member in enum_cls:
        if wanted in (_normalize(member.value), _normalize(member.name)):
            return member
    if enum_cls is Madhab and wanted in _MADHAB_ALIASES:
        return _MADHAB_ALIASES[wanted]  # type: ignore[return-value]
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Invalid {enum_cls.__name__} {raw!r}; expected one of: {allowed}")


def _float_or_none(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class Settings:
    """User-facing configuration. Angles are optional overrides of the method preset."""

    method: str = "Other"
    fajr_angle: float | None = None
    isha_angle: float | None = None
    isha_interval: float | None = None
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    shafaq: Shafaq = Shafaq.GENERAL
    timezone: str | None = None  # IANA zone; None = look up from coordinates
    lang: str = "en"
    geocode_api_key: str | None = None

    def to_parameters(self) -> CalculationParameters:
        """Hydrate CalculationParameters from the preset plus overrides.

        Raises:
            UnknownMethodError: ``method`` is not a known preset.
        """
        return parameters_for(
            self.method,
            fajr_angle=self.fajr_angle,
            isha_angle=self.isha_angle,
            isha_interval=self.isha_interval,
            madhab=self.madhab,
            high_latitude_rule=self.high_latitude_rule,
            shafaq=self.shafaq,
        )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read ``SALAT_*`` variables (and ``GEOCODE_API_KEY``) into Settings.

    Unparseable angles are ignored so the preset value applies; unknown
    enum values raise ValueError.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()

    def _enum(name: str, enum_cls: type[E], default: E) -> E:
        raw = env.get(name)
        return parse_enum(enum_cls, raw) if raw else default

    return Settings(
        method=env.get("SALAT_METHOD") or defaults.method,
        fajr_angle=_float_or_none(env.get("SALAT_FAJR_ANGLE")),
        isha_angle=_float_or_none(env.get("SALAT_ISHA_ANGLE")),
        isha_interval=_float_or_none(env.get("SALAT_ISHA_INTERVAL")),
        madhab=_enum("SALAT_MADHAB", Madhab, defaults.madhab),
        high_latitude_rule=_enum(
            "SALAT_HIGH_LATITUDE_RULE", HighLatitudeRule, defaults.high_latitude_rule
        ),
        shafaq=_enum("SALAT_SHAFAQ", Shafaq, defaults.shafaq),
        timezone=env.get("SALAT_TIMEZONE") or None,
        lang=env.get("SALAT_LANG") or defaults.lang,
        geocode_api_key=env.get("GEOCODE_API_KEY") or None,
    )
