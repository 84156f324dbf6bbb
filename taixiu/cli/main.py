import typer
import requests
import os

from taixiu.log import setup_logging


app = typer.Typer()
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
API_KEY = os.getenv("API_KEY")


def _headers():
    h = {}
    if API_KEY:
        h["X-API-Key"] = API_KEY
    return h


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")):
    setup_logging("DEBUG" if verbose else None)


@app.command()
def predict():
    r = requests.get(f"{BASE}/predict", headers=_headers())
    d = r.json()
    if r.ok:
        typer.echo(f"{d['prediction']} ({d['confidence']:.2f}%)")
        typer.echo(d['reason'])
    else:
        typer.echo(d)


@app.command()
def learn(d1: int, d2: int, d3: int, session: int = typer.Option(None)):
    body = {"d1": d1, "d2": d2, "d3": d3, "session": session}
    r = requests.post(f"{BASE}/learn", json=body, headers=_headers())
    typer.echo(r.json())


@app.command()
def state():
    r = requests.get(f"{BASE}/state", headers=_headers())
    typer.echo(r.json())


@app.command()
def sync():
    r = requests.post(f"{BASE}/sync", headers=_headers())
    typer.echo(r.json())


if __name__ == "__main__":
    app()
