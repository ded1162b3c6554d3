# run.py
from pki_sample import create_app

app = create_app()

if __name__ == "__main__":
    # ambiente de desenvolvimento; NÃO usar em produção
    app.run(host="127.0.0.1", port=5000, debug=True)
