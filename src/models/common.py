# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared model types.

Bilingual names arrive from the record store in several shapes: a plain
string, a JSON-encoded ``{"en": ..., "ar": ...}`` string, or an already
decoded mapping. to_localized_text() is the single place that tells them
apart; everything downstream works with LocalizedText.
"""

import json
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "ar"


class PlainText(BaseModel):
    """Text without translations."""

    kind: Literal["plain"] = "plain"
    text: str = ""

    def resolve(self, lang: str = DEFAULT_LANGUAGE) -> str:
        return self.text


class Bilingual(BaseModel):
    """Text in English and Arabic."""

    kind: Literal["bilingual"] = "bilingual"
    en: str = ""
    ar: str = ""

    def resolve(self, lang: str = DEFAULT_LANGUAGE) -> str:
        """Text in the requested language, falling back to Arabic."""
        if lang == "en" and self.en:
            return self.en
        if lang == "ar" and self.ar:
            return self.ar
        return self.ar or ""


LocalizedText = Annotated[Union[PlainText, Bilingual], Field(discriminator="kind")]


def to_localized_text(value: Any) -> PlainText | Bilingual:
    """Normalize a raw name field into LocalizedText.

    Args:
        value: None, a plain string, a JSON object string, or a mapping
            with ``en``/``ar`` keys.

    Returns:
        PlainText or Bilingual.
    """
    if value is None:
        return PlainText()
    if isinstance(value, (PlainText, Bilingual)):
        return value
    if isinstance(value, Mapping):
        return Bilingual(en=str(value.get("en") or ""), ar=str(value.get("ar") or ""))
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("{"):
            try:
                decoded = json.loads(stripped)
            except ValueError:
                logger.debug("Name field is not valid JSON, keeping as text: %r", value)
            else:
                if isinstance(decoded, Mapping):
                    return to_localized_text(decoded)
        return PlainText(text=value)
    return PlainText(text=str(value))
