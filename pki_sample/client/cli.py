import argparse
import asyncio
import logging
import sys

from ..errors import PkiSampleError
from .component import FileCertificateComponent
from .sequencer import AuthenticationSequencer
from .transport import CoordinatorTransport


async def login(args):
    component = FileCertificateComponent(
        key_pairs=[(args.key, args.cert)] if args.key else [],
        pkcs12_files=[args.pfx] if args.pfx else [],
        passphrase=args.passphrase.encode() if args.passphrase else None,
    )
    transport = CoordinatorTransport(args.server, timeout=args.timeout)
    sequencer = AuthenticationSequencer(component, transport)

    flow = await sequencer.init()
    for item in flow.certificates:
        print(f"{item.thumbprint}  {item.subject_name} (emitido por {item.issuer_name})")

    thumbprint = args.thumbprint or flow.certificates[0].thumbprint
    outcome = await sequencer.sign_in(flow, thumbprint)
    print(outcome.message)
    if outcome.validation_results:
        print(outcome.validation_results)
    return 0 if outcome.success else 1


def main(argv=None):
    parser = argparse.ArgumentParser(description="Autenticação com certificado digital sem navegador")
    parser.add_argument("--server", default="http://127.0.0.1:5000", help="URL base da aplicação")
    parser.add_argument("--key", help="chave privada (PEM/DER)")
    parser.add_argument("--cert", help="certificado (PEM/DER) correspondente a --key")
    parser.add_argument("--pfx", help="arquivo PKCS#12 com chave e certificado")
    parser.add_argument("--passphrase", help="senha da chave ou do PKCS#12")
    parser.add_argument("--thumbprint", help="certificado a usar (padrão: o primeiro)")
    parser.add_argument("--timeout", type=float, default=30, help="timeout das requisições (segundos)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    if not args.pfx and not (args.key and args.cert):
        parser.error("informe --pfx ou o par --key/--cert")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(login(args))
    except PkiSampleError as e:
        print(f"erro: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
