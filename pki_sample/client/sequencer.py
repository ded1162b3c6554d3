"""
Sequenciador do fluxo de autenticação por certificado.

Cada passo externo (componente de certificados ou servidor) é um ``await``;
o estado do fluxo fica num objeto ``AuthenticationFlow`` explícito, passado
de transição em transição.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Optional

from ..errors import FlowInProgressError, PkiSampleError
from .component import CertificateListItem
from .transport import AuthOutcome

logger = logging.getLogger(__name__)


class FlowState(enum.Enum):
    IDLE = "Idle"
    COMPONENT_READY = "ComponentReady"
    CERTIFICATES_LISTED = "CertificatesListed"
    AUTH_STARTED = "AuthStarted"
    CERTIFICATE_READ = "CertificateRead"
    SIGNED = "Signed"
    COMPLETED = "Completed"


@dataclass
class AuthenticationFlow:
    state: FlowState = FlowState.IDLE
    certificates: list[CertificateListItem] = field(default_factory=list)
    thumbprint: Optional[str] = None
    nonce: Optional[bytes] = None
    certificate: Optional[bytes] = None
    signature: Optional[bytes] = None
    outcome: Optional[AuthOutcome] = None
    error: Optional[Exception] = None


class AuthenticationSequencer:
    def __init__(self, component, transport, digest_algorithm: str = "sha256"):
        self.component = component
        self.transport = transport
        self.digest_algorithm = digest_algorithm
        self._busy = asyncio.Lock()

    def _acquire(self):
        # equivalente ao bloqueio da interface enquanto há uma chamada pendente
        if self._busy.locked():
            raise FlowInProgressError("já existe uma operação em andamento")
        return self._busy

    async def init(self) -> AuthenticationFlow:
        flow = AuthenticationFlow()
        async with self._acquire():
            await self.component.init()
            flow.state = FlowState.COMPONENT_READY
        return await self.list_certificates(flow)

    async def list_certificates(self, flow: AuthenticationFlow) -> AuthenticationFlow:
        if flow.state == FlowState.IDLE:
            raise PkiSampleError("o componente de certificados não foi inicializado")
        async with self._acquire():
            flow.certificates = await self.component.list_certificates()
            flow.state = FlowState.CERTIFICATES_LISTED
        return flow

    async def sign_in(self, flow: AuthenticationFlow, thumbprint: str) -> AuthOutcome:
        if flow.state not in (FlowState.CERTIFICATES_LISTED, FlowState.COMPLETED):
            raise PkiSampleError(f"não é possível autenticar no estado {flow.state.value}")

        async with self._acquire():
            flow.thumbprint = thumbprint
            flow.nonce = None
            flow.certificate = None
            flow.signature = None
            flow.outcome = None
            flow.error = None
            try:
                flow.nonce = await self.transport.start_authentication()
                flow.state = FlowState.AUTH_STARTED

                flow.certificate = await self.component.read_certificate(thumbprint)
                flow.state = FlowState.CERTIFICATE_READ

                flow.signature = await self.component.sign_data(
                    thumbprint, flow.nonce, self.digest_algorithm
                )
                flow.state = FlowState.SIGNED

                nonce, flow.nonce = flow.nonce, None
                flow.outcome = await self.transport.complete_authentication(
                    flow.certificate, nonce, flow.signature
                )
                flow.state = FlowState.COMPLETED
            except Exception as e:
                logger.warning("autenticação interrompida em %s: %s", flow.state.value, e)
                flow.error = e
                flow.nonce = None
                flow.state = FlowState.CERTIFICATES_LISTED
                raise
        return flow.outcome
