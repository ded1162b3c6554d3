from .authentication import (
    AuthenticationResult,
    CertificateAuthentication,
    ValidationResults,
    common_name,
    display_name,
)
from .nonce_store import FileNonceStore
