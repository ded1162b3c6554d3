from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


def _name_display(name):
    if not name:
        return None
    if isinstance(name, str):
        return name
    return name.get("commonName") or name.get("organization")


def _parse_date(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class PkiBrazilInfo:
    cpf: Optional[str] = None
    cnpj: Optional[str] = None
    responsavel: Optional[str] = None
    company_name: Optional[str] = None
    certificate_type: Optional[str] = None

    @classmethod
    def from_model(cls, model):
        model = model or {}
        return cls(
            cpf=model.get("cpf"),
            cnpj=model.get("cnpj"),
            responsavel=model.get("responsavel"),
            company_name=model.get("companyName"),
            certificate_type=model.get("certificateType"),
        )


@dataclass
class PKCertificate:
    """Dados do certificado do signatário conforme devolvidos pelo REST PKI."""

    subject_name: Optional[str] = None
    issuer_name: Optional[str] = None
    email_address: Optional[str] = None
    serial_number: Optional[str] = None
    validity_start: Optional[datetime] = None
    validity_end: Optional[datetime] = None
    pki_brazil: PkiBrazilInfo = field(default_factory=PkiBrazilInfo)
    issuer: Optional["PKCertificate"] = None

    @classmethod
    def from_model(cls, model):
        if not model:
            return None
        return cls(
            subject_name=_name_display(model.get("subjectName")),
            issuer_name=_name_display(model.get("issuerName")),
            email_address=model.get("emailAddress"),
            serial_number=model.get("serialNumber"),
            validity_start=_parse_date(model.get("validityStart")),
            validity_end=_parse_date(model.get("validityEnd")),
            pki_brazil=PkiBrazilInfo.from_model(model.get("pkiBrazil")),
            issuer=cls.from_model(model.get("issuer")),
        )
