from .component import CertificateComponent, CertificateListItem, FileCertificateComponent
from .sequencer import AuthenticationFlow, AuthenticationSequencer, FlowState
from .transport import AuthOutcome, CoordinatorTransport
