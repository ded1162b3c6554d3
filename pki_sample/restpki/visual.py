"""
Representação visual de assinaturas PAdES.

O posicionamento é um tipo variante: cada classe de ``*Positioning`` carrega
os próprios parâmetros e sabe produzir o modelo JSON esperado pelo REST PKI.
Os presets (rodapé e nova página) são obtidos do próprio serviço, que é quem
faz o cálculo geométrico final no PDF.
"""
import base64
from dataclasses import dataclass, field
from typing import Optional, Union

from ..errors import UpstreamError

CENTIMETERS = "Centimeters"
PDF_POINTS = "PdfPoints"

ALIGN_LEFT = "Left"
ALIGN_RIGHT = "Right"


@dataclass
class Size:
    width: float
    height: float

    def to_model(self):
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Box:
    """Retângulo resolvido: deslocamentos a partir das bordas da página."""

    left: float
    bottom: float
    width: float
    height: float
    page_width: float
    page_height: float

    @property
    def right(self):
        return self.page_width - self.left - self.width

    @property
    def top(self):
        return self.page_height - self.bottom - self.height


@dataclass
class Rectangle:
    left: Optional[float] = None
    top: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

    def width_left_anchored(self, width, left):
        self.width, self.left, self.right = width, left, None
        return self

    def width_right_anchored(self, width, right):
        self.width, self.right, self.left = width, right, None
        return self

    def width_centered(self, width):
        self.width, self.left, self.right = width, None, None
        return self

    def height_bottom_anchored(self, height, bottom):
        self.height, self.bottom, self.top = height, bottom, None
        return self

    def height_top_anchored(self, height, top):
        self.height, self.top, self.bottom = height, top, None
        return self

    def height_centered(self, height):
        self.height, self.top, self.bottom = height, None, None
        return self

    def horizontal_stretch(self, left, right):
        self.left, self.right, self.width = left, right, None
        return self

    def vertical_stretch(self, top, bottom):
        self.top, self.bottom, self.height = top, bottom, None
        return self

    def resolve(self, page_width: float, page_height: float) -> Box:
        left, width = _resolve_axis(self.left, self.width, self.right, page_width, "horizontal")
        bottom, height = _resolve_axis(self.bottom, self.height, self.top, page_height, "vertical")
        return Box(left, bottom, width, height, page_width, page_height)

    def to_model(self):
        return {
            k: v for k, v in (
                ("left", self.left), ("top", self.top), ("right", self.right),
                ("bottom", self.bottom), ("width", self.width), ("height", self.height),
            ) if v is not None
        }


def _resolve_axis(near, length, far, total, axis):
    if length is not None:
        if near is not None:
            return near, length
        if far is not None:
            return total - far - length, length
        return (total - length) / 2, length
    if near is not None and far is not None:
        return near, total - near - far
    raise ValueError(f"retângulo sem dimensão {axis} definida")


@dataclass
class VisualText:
    text: str
    include_signing_time: bool = True
    horizontal_align: str = ALIGN_LEFT

    def to_model(self):
        return {
            "text": self.text,
            "includeSigningTime": self.include_signing_time,
            "horizontalAlign": self.horizontal_align,
        }


@dataclass
class VisualImage:
    content: bytes
    mime_type: str = "image/png"
    opacity: int = 100
    horizontal_align: str = "Center"
    vertical_align: str = "Center"

    def to_model(self):
        return {
            "resource": {
                "content": base64.b64encode(self.content).decode(),
                "mimeType": self.mime_type,
            },
            "opacity": self.opacity,
            "horizontalAlign": self.horizontal_align,
            "verticalAlign": self.vertical_align,
        }


# --- posicionamentos ---------------------------------------------------------

@dataclass
class FootnotePositioning:
    """Rodapé da última página; assinaturas futuras entram em sequência."""

    page_number: Optional[int] = None

    def to_model(self, client):
        return get_footnote_preset(client, self.page_number)


@dataclass
class FootnoteCustomPositioning:
    left: float = 2.54
    bottom: float = 2.54
    right: float = 2.54
    page_number: Optional[int] = None

    def to_model(self, client):
        model = get_footnote_preset(client, self.page_number)
        container = _auto_container(model)
        container["left"] = self.left
        container["bottom"] = self.bottom
        container["right"] = self.right
        return model


@dataclass
class NewPagePositioning:
    """Nova página anexada ao fim do documento."""

    def to_model(self, client):
        return get_new_page_preset(client)


@dataclass
class NewPageCustomPositioning:
    left: float = 2.54
    top: float = 2.54
    right: float = 2.54
    signature_size: Size = field(default_factory=lambda: Size(5, 3))

    def to_model(self, client):
        model = get_new_page_preset(client)
        container = _auto_container(model)
        container["left"] = self.left
        container["top"] = self.top
        container["right"] = self.right
        model["auto"]["signatureRectangleSize"] = self.signature_size.to_model()
        return model


@dataclass
class ManualPositioning:
    # página 0: nova página anexada ao fim do documento
    rectangle: Rectangle
    page_number: int = 0
    measurement_units: str = CENTIMETERS

    def to_model(self, client=None):
        return {
            "pageNumber": self.page_number,
            "measurementUnits": self.measurement_units,
            "manual": self.rectangle.to_model(),
        }

    def resolve(self, page_width, page_height) -> Box:
        return self.rectangle.resolve(page_width, page_height)


@dataclass
class AutoAllocatePositioning:
    """
    Container onde as assinaturas são dispostas lado a lado, quebrando para a
    linha seguinte quando não há espaço. Páginas negativas contam do fim do
    documento (-1 é a última).
    """

    container: Rectangle
    signature_rectangle_size: Size
    row_spacing: float = 1.0
    page_number: int = -1
    measurement_units: str = CENTIMETERS

    def to_model(self, client=None):
        return {
            "pageNumber": self.page_number,
            "measurementUnits": self.measurement_units,
            "auto": {
                "container": self.container.to_model(),
                "signatureRectangleSize": self.signature_rectangle_size.to_model(),
                "rowSpacing": self.row_spacing,
            },
        }


Positioning = Union[
    FootnotePositioning,
    FootnoteCustomPositioning,
    NewPagePositioning,
    NewPageCustomPositioning,
    ManualPositioning,
    AutoAllocatePositioning,
]


def _auto_container(model):
    try:
        return model["auto"]["container"]
    except (KeyError, TypeError) as e:
        raise UpstreamError("preset de posicionamento sem container automático") from e


def get_footnote_preset(client, page_number=None):
    params = {"pageNumber": page_number} if page_number is not None else None
    return client.get("Api/PadesVisualPositioningPresets/Footnote", params=params)


def get_new_page_preset(client):
    return client.get("Api/PadesVisualPositioningPresets/NewPage")


def sample_positioning(sample_number: int) -> Positioning:
    """Os seis exemplos de posicionamento da aplicação de demonstração."""
    if sample_number == 1:
        return FootnotePositioning()
    if sample_number == 2:
        return FootnoteCustomPositioning(left=2.54, bottom=2.54, right=2.54)
    if sample_number == 3:
        return NewPagePositioning()
    if sample_number == 4:
        return NewPageCustomPositioning(left=2.54, top=2.54, right=2.54, signature_size=Size(5, 3))
    if sample_number == 5:
        # 5cm x 3cm a uma polegada das margens esquerda e inferior
        rect = Rectangle().width_left_anchored(5.0, 2.54).height_bottom_anchored(3.0, 2.54)
        return ManualPositioning(rectangle=rect, page_number=0)
    if sample_number == 6:
        container = Rectangle().horizontal_stretch(2.54, 2.54).height_bottom_anchored(12.31, 2.54)
        return AutoAllocatePositioning(
            container=container,
            signature_rectangle_size=Size(5.0, 3.0),
            row_spacing=1.0,
            page_number=-1,
        )
    raise ValueError(f"exemplo de posicionamento desconhecido: {sample_number}")


@dataclass
class VisualRepresentation:
    text: Optional[VisualText] = None
    image: Optional[VisualImage] = None
    position: Optional[Positioning] = None

    def to_model(self, client):
        if self.position is None:
            raise ValueError("a representação visual exige um posicionamento")
        model = {"position": self.position.to_model(client)}
        if self.text is not None:
            model["text"] = self.text.to_model()
        if self.image is not None:
            model["image"] = self.image.to_model()
        return model
