class PkiSampleError(Exception):
    """Erro base da aplicação."""


class UpstreamError(PkiSampleError):
    """O serviço externo (REST PKI / autenticação) rejeitou a requisição."""

    def __init__(self, message, status_code=None, code=None, detail=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail


class ValidationError(UpstreamError):
    """Rejeição acompanhada de um relatório de validação."""

    def __init__(self, message, validation_results, status_code=422, code=None):
        super().__init__(message, status_code=status_code, code=code)
        self.validation_results = validation_results


class InvalidTokenError(PkiSampleError):
    """Token ou nonce desconhecido, expirado ou já utilizado."""


class ComponentError(PkiSampleError):
    """Falha no componente de certificados (init, list, read ou sign)."""


class ServerCommunicationError(PkiSampleError):
    """Falha de rede entre o cliente e o servidor da aplicação."""


class FlowInProgressError(PkiSampleError):
    """Já existe uma chamada pendente neste fluxo."""
