from __future__ import annotations

from typing import Iterator, Sequence

from pydantic import BaseModel, Field

from ..errors import UnknownStyle

CUSTOM_STYLE_ID = "custom"

_KEEP_IDENTITY = "Keep the face and pose exactly the same."


class StylePreset(BaseModel):
    """A named outfit style offered to the user."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    icon: str = Field(default="")

    model_config = {"frozen": True}


class StyleCatalog:
    """Ordered, id-indexed collection of style presets."""

    def __init__(self, presets: Sequence[StylePreset]) -> None:
        self._presets = list(presets)
        self._by_id: dict[str, StylePreset] = {}
        for preset in self._presets:
            if preset.id == CUSTOM_STYLE_ID:
                raise ValueError(f"'{CUSTOM_STYLE_ID}' is reserved for free-text prompts")
            if preset.id in self._by_id:
                raise ValueError(f"Duplicate style preset id: {preset.id}")
            self._by_id[preset.id] = preset

    def __iter__(self) -> Iterator[StylePreset]:
        return iter(self._presets)

    def __len__(self) -> int:
        return len(self._presets)

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._by_id

    def get(self, style_id: str) -> StylePreset:
        try:
            return self._by_id[style_id]
        except KeyError:
            raise UnknownStyle(style_id) from None


DEFAULT_STYLES = StyleCatalog(
    [
        StylePreset(
            id="cyberpunk",
            name="Cyberpunk",
            prompt=(
                "Change the clothing to a futuristic cyberpunk street style with neon accents, "
                f"leather jacket, and tech-wear aesthetics. {_KEEP_IDENTITY}"
            ),
            icon="⚡",
        ),
        StylePreset(
            id="business",
            name="Business Pro",
            prompt=(
                "Change the clothing to a high-end, tailored professional navy blue business suit "
                f"with a crisp white shirt. {_KEEP_IDENTITY}"
            ),
            icon="💼",
        ),
        StylePreset(
            id="casual",
            name="Street Casual",
            prompt=(
                "Change the clothing to a relaxed, trendy streetwear outfit with a graphic oversized "
                f"hoodie and denim. {_KEEP_IDENTITY}"
            ),
            icon="🧢",
        ),
        StylePreset(
            id="fantasy",
            name="RPG Fantasy",
            prompt=(
                "Change the clothing to medieval fantasy rogue armor with leather straps, a cloak, "
                f"and intricate details. {_KEEP_IDENTITY}"
            ),
            icon="⚔️",
        ),
        StylePreset(
            id="gala",
            name="Red Carpet",
            prompt=(
                "Change the clothing to an elegant, glamorous red carpet evening gown or tuxedo with "
                f"luxurious fabric textures. {_KEEP_IDENTITY}"
            ),
            icon="✨",
        ),
        StylePreset(
            id="summer",
            name="Beach Vibes",
            prompt=(
                "Change the clothing to a light, airy floral summer outfit suitable for a beach "
                f"resort. {_KEEP_IDENTITY}"
            ),
            icon="🏖️",
        ),
        StylePreset(
            id="winter",
            name="Winter Coat",
            prompt=(
                "Change the clothing to a thick, cozy wool trench coat with a scarf, suitable for "
                f"snowy weather. {_KEEP_IDENTITY}"
            ),
            icon="❄️",
        ),
    ]
)
