"""Block model resolution: find the texture seen on the top face of a block."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

__all__ = [
    "Variant",
    "Blockstate",
    "Model",
    "Element",
    "Face",
    "Rotation",
    "TexError",
    "Renderer",
    "merge_models",
]

Texture = bytes


class TexError(Exception):
    """A failure to resolve a block's texture.

    ``kind`` is one of ``unsupported``, ``missing_blockstate``,
    ``missing_variant``, ``missing_model``, ``missing_model_textures``,
    ``missing_texture``, ``missing_elements`` or
    ``missing_texture_variable``; ``details`` holds the names involved.
    """

    def __init__(self, kind: str, *details: str) -> None:
        super().__init__(kind, *details)
        self.kind = kind
        self.details = details

    def __str__(self) -> str:
        if not self.details:
            return self.kind
        return f"{self.kind}: {', '.join(self.details)}"


def _require(data: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"{what} is missing field {key!r}") from None


@dataclass
class Variant:
    """One way of drawing a block state: a model and its rotation."""

    model: str
    x: Optional[int] = None
    y: Optional[int] = None
    uvlock: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Variant":
        return cls(
            model=_require(data, "model", "variant"),
            x=data.get("x"),
            y=data.get("y"),
            uvlock=data.get("uvlock"),
        )


def _parse_variants(data: Any) -> list[Variant]:
    if isinstance(data, list):
        return [Variant.from_dict(item) for item in data]
    return [Variant.from_dict(data)]


@dataclass
class Blockstate:
    """A blockstate definition, either keyed variants or multipart."""

    variants: Optional[dict[str, list[Variant]]] = None
    multipart: Optional[list[list[Variant]]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Blockstate":
        present = {"variants", "multipart"} & set(data)
        if len(present) != 1:
            raise ValueError("blockstate needs exactly one of 'variants' or 'multipart'")
        if "variants" in data:
            return cls(
                variants={
                    key: _parse_variants(value) for key, value in data["variants"].items()
                }
            )
        return cls(
            multipart=[
                _parse_variants(_require(part, "apply", "multipart part"))
                for part in data["multipart"]
            ]
        )


@dataclass
class Face:
    texture: str
    uv: Optional[tuple[float, float, float, float]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Face":
        uv = data.get("uv")
        return cls(
            texture=_require(data, "texture", "face"),
            uv=tuple(float(v) for v in uv) if uv is not None else None,
        )


@dataclass
class Rotation:
    origin: list[float]
    axis: str
    angle: float
    rescale: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rotation":
        return cls(
            origin=[float(v) for v in _require(data, "origin", "rotation")],
            axis=_require(data, "axis", "rotation"),
            angle=float(_require(data, "angle", "rotation")),
            rescale=bool(data.get("rescale", False)),
        )


@dataclass
class Element:
    """A cuboid of a model with its faces."""

    from_: tuple[float, float, float]
    to: tuple[float, float, float]
    faces: dict[str, Face] = field(default_factory=dict)
    rotation: Optional[Rotation] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Element":
        rotation = data.get("rotation")
        return cls(
            from_=tuple(float(v) for v in _require(data, "from", "element")),
            to=tuple(float(v) for v in _require(data, "to", "element")),
            faces={
                name: Face.from_dict(face)
                for name, face in _require(data, "faces", "element").items()
            },
            rotation=Rotation.from_dict(rotation) if rotation is not None else None,
        )


@dataclass
class Model:
    """A block model, possibly inheriting from a parent model."""

    parent: Optional[str] = None
    textures: Optional[dict[str, str]] = None
    elements: Optional[list[Element]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Model":
        textures = data.get("textures")
        elements = data.get("elements")
        return cls(
            parent=data.get("parent"),
            textures=dict(textures) if textures is not None else None,
            elements=[Element.from_dict(e) for e in elements] if elements is not None else None,
        )


def merge_models(child: Model, parent: Model) -> Model:
    """Fold a child model into its parent, returning the combined model.

    The child's textures are copied into the parent's, texture variables of
    the form ``#name`` are resolved against the child, and the child's
    elements are appended to the parent's.
    """
    if child.textures is None:
        raise TexError("missing_model_textures")
    child_textures = child.textures

    merged = dict(parent.textures or {})
    merged.update(child_textures)

    def resolve(value: str) -> str:
        if not value.startswith("#"):
            return value
        try:
            return child_textures[value[1:]]
        except KeyError:
            raise TexError("missing_texture_variable", "?", "?", "?", value) from None

    textures = {key: resolve(value) for key, value in merged.items()}

    if parent.elements is None:
        elements = list(child.elements) if child.elements is not None else None
    else:
        elements = list(parent.elements) + list(child.elements or [])

    return Model(parent=parent.parent, textures=textures, elements=elements)


class Renderer:
    """Looks up blockstates, models and textures to find a block's top face."""

    def __init__(
        self,
        blockstates: Mapping[str, Blockstate],
        models: Mapping[str, Model],
        textures: Mapping[str, Texture],
    ) -> None:
        self.blockstates = dict(blockstates)
        self.models = dict(models)
        self.textures = dict(textures)

    def _get_model(self, name: str) -> Model:
        model = self.models.get(name)
        if model is None:
            model = self.models.get("minecraft:" + name)
        if model is None:
            raise TexError("missing_model", name)
        return model

    def flatten_model(self, model: str) -> Model:
        """Resolve a model and all of its ancestors into one model."""
        flat = self._get_model(model)
        while flat.parent is not None:
            flat = merge_models(flat, self._get_model(flat.parent))
        return flat

    def _extract_texture(self, name: str) -> Texture:
        texture = self.textures.get(name)
        if texture is None:
            texture = self.textures.get("minecraft:" + name)
        if texture is None:
            raise TexError("missing_texture", "?", "?", name)
        return texture

    def _model_get_top(self, block_id: str, encoded_props: str, model_name: str) -> Texture:
        model = self.flatten_model(model_name)
        missing = TexError("missing_elements", block_id, encoded_props, model_name)
        if not model.elements:
            raise missing
        face = model.elements[0].faces.get("up")
        if face is None:
            raise missing

        texture = face.texture
        if texture.startswith("#"):
            if model.textures is None:
                raise TexError("missing_model_textures")
            try:
                texture = model.textures[texture[1:]]
            except KeyError:
                raise TexError(
                    "missing_texture_variable", block_id, encoded_props, model_name, texture
                ) from None
        return self._extract_texture(texture)

    def get_top(self, block_id: str, encoded_props: str) -> Texture:
        """Return the texture on the top face of the block in the given state."""
        blockstate = self.blockstates.get(block_id)
        if blockstate is None:
            raise TexError("missing_blockstate", block_id)
        if blockstate.variants is None:
            raise TexError("unsupported")

        variants = blockstate.variants.get(encoded_props)
        if variants is None:
            raise TexError("missing_variant", block_id, encoded_props)
        return self._model_get_top(block_id, encoded_props, variants[0].model)