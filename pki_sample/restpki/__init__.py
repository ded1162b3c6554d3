from .certificate import PKCertificate, PkiBrazilInfo
from .client import RestPkiClient
from .pades import (
    PADES_BASIC_POLICY_ID,
    PKI_BRAZIL_SECURITY_CONTEXT_ID,
    PadesSignatureFinisher,
    PadesSignatureStarter,
)
from .visual import (
    AutoAllocatePositioning,
    FootnoteCustomPositioning,
    FootnotePositioning,
    ManualPositioning,
    NewPageCustomPositioning,
    NewPagePositioning,
    Rectangle,
    Size,
    VisualImage,
    VisualRepresentation,
    VisualText,
    sample_positioning,
)
