from fastapi import FastAPI, HTTPException
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Exchange Rate Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/rates_stub") if os.path.exists("/rates_stub") else Path(__file__).resolve().parents[1] / "rates_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rates")
def get_rate(base: str = "USD", quote: str = "ARS"):
    rates = json.loads((DATA_DIR / "rates.json").read_text())
    pair = f"{base.upper()}/{quote.upper()}"
    if pair not in rates:
        raise HTTPException(status_code=404, detail="pair not found")
    return {"base": base.upper(), "quote": quote.upper(), "rate": rates[pair]}
