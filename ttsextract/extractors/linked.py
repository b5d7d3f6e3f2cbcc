"""Collection of externally hosted resources referenced by a save."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..document import JsonDict, JsonValue, is_json_array, is_json_dict
from ..logging import get_logger
from ..models import (
    RESOURCE_ASSET_BUNDLE,
    RESOURCE_AUDIO,
    RESOURCE_IMAGE,
    RESOURCE_MODEL,
    RESOURCE_PDF,
    ResourceRecord,
)
from .base import Extractor

FieldTable = Sequence[Tuple[str, str]]

# Object types and the custom section holding their URLs:
#   Card, CardCustom, Deck, DeckCustom        CustomDeck
#   Custom_Assetbundle                        CustomAssetbundle
#   Custom_Board, Custom_Dice, Custom_Tile,
#   Custom_Tile_Stack, Custom_Token,
#   Custom_Token_Stack, Figurine_Custom       CustomImage
#   Custom_Model                              CustomMesh
#   Custom_PDF                                CustomPDF
_CUSTOM_IMAGE_FIELDS: FieldTable = (
    ("ImageURL", RESOURCE_IMAGE),
    ("ImageSecondaryURL", RESOURCE_IMAGE),
)
_CUSTOM_DECK_FIELDS: FieldTable = (
    ("FaceURL", RESOURCE_IMAGE),
    ("BackURL", RESOURCE_IMAGE),
)
_CUSTOM_ASSETBUNDLE_FIELDS: FieldTable = (
    ("AssetbundleURL", RESOURCE_ASSET_BUNDLE),
    ("AssetbundleSecondaryURL", RESOURCE_ASSET_BUNDLE),
)
_CUSTOM_MESH_FIELDS: FieldTable = (
    ("MeshURL", RESOURCE_MODEL),
    ("DiffuseURL", RESOURCE_IMAGE),
    ("NormalURL", RESOURCE_IMAGE),
    ("ColliderURL", RESOURCE_MODEL),
)
_CUSTOM_PDF_FIELDS: FieldTable = (("PDFUrl", RESOURCE_PDF),)

_MOD_FIELDS: FieldTable = (
    ("TableURL", RESOURCE_IMAGE),
    ("SkyURL", RESOURCE_IMAGE),
)


class LinkedExtractor(Extractor):
    """Gathers linked resource URLs; the first kind seen for a URL is kept."""

    def __init__(self) -> None:
        self._resources_lkup: Dict[str, ResourceRecord] = {}
        self.logger = get_logger("extractors.linked")

    @property
    def resources(self) -> List[ResourceRecord]:
        """Resources sorted by URL."""
        return sorted(self._resources_lkup.values(), key=lambda record: record.url)

    def extract(self, mod: JsonDict) -> None:
        self._extract_from_mod(mod)
        for obj in self.iter_objects(mod):
            self._extract_from_obj(obj)
        self.logger.debug("Found %d linked resources", len(self._resources_lkup))

    def add_linked_resource(self, url: JsonValue, kind: str) -> None:
        if not isinstance(url, str) or not url:
            return
        if url in self._resources_lkup:
            return
        self._resources_lkup[url] = ResourceRecord(url=url, kind=kind)

    def _add_fields(self, section: JsonValue, fields: FieldTable) -> None:
        if not is_json_dict(section):
            return
        for key, kind in fields:
            self.add_linked_resource(section.get(key), kind)

    def _extract_from_mod(self, mod: JsonDict) -> None:
        self._add_fields(mod, _MOD_FIELDS)

        lighting = mod.get("Lighting")
        if is_json_dict(lighting):
            self.add_linked_resource(lighting.get("LutURL"), RESOURCE_IMAGE)

        music_player = mod.get("MusicPlayer")
        if is_json_dict(music_player):
            self.add_linked_resource(music_player.get("CurrentAudioURL"), RESOURCE_AUDIO)
            library = music_player.get("AudioLibrary")
            if is_json_array(library):
                for entry in library:
                    if is_json_dict(entry):
                        self.add_linked_resource(entry.get("Item1"), RESOURCE_AUDIO)

        ui_assets = mod.get("CustomUIAssets")
        if is_json_array(ui_assets):
            for asset in ui_assets:
                if is_json_dict(asset):
                    self.add_linked_resource(asset.get("URL"), RESOURCE_IMAGE)

    def _extract_from_obj(self, obj: JsonDict) -> None:
        self._add_fields(obj.get("CustomImage"), _CUSTOM_IMAGE_FIELDS)

        decks = obj.get("CustomDeck")
        if is_json_dict(decks):
            for deck in decks.values():
                self._add_fields(deck, _CUSTOM_DECK_FIELDS)

        self._add_fields(obj.get("CustomAssetbundle"), _CUSTOM_ASSETBUNDLE_FIELDS)
        self._add_fields(obj.get("CustomMesh"), _CUSTOM_MESH_FIELDS)
        self._add_fields(obj.get("CustomPDF"), _CUSTOM_PDF_FIELDS)


__all__ = ["LinkedExtractor"]
