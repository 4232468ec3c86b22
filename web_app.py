"""FastAPI application serving proposal pages and frame responses.

Run with:
    uvicorn web_app:app --reload

A `.env` file is loaded on import, so its HOST also applies when launched this way.
"""

from __future__ import annotations

import json
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse

from eip_fetcher import DocumentFetchError
from frames import build_frame_response, render_home_html
from front_matter import MetadataParseError
from identifiers import MalformedIdentifierError
from renderer import render_proposal

load_dotenv()

API_VERSION = "0.1.0"

LOGGER = logging.getLogger(__name__)

app = FastAPI(
    title="EIP.tools",
    description="Browse EIPs and ERCs",
    version=API_VERSION,
    docs_url=None,
    redoc_url=None,
)


@app.get("/", response_class=HTMLResponse)
async def home() -> HTMLResponse:
    return HTMLResponse(render_home_html())


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "ok", "version": API_VERSION}


@app.get("/eip/{eip_or_no}", response_class=HTMLResponse)
def proposal_page(eip_or_no: str) -> HTMLResponse:
    """Render one proposal; accepts ``1234``, ``eip-1234`` or ``eip-1234.md``."""
    try:
        html = render_proposal(eip_or_no)
    except MalformedIdentifierError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DocumentFetchError as exc:
        LOGGER.warning("Upstream fetch failed for %s: %s", eip_or_no, exc)
        raise HTTPException(status_code=502, detail="Could not fetch proposal source") from exc
    except MetadataParseError as exc:
        LOGGER.warning("Bad front matter for %s: %s", eip_or_no, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return HTMLResponse(html)


@app.post("/api/frame/home", response_class=HTMLResponse)
async def frame_home(request: Request) -> HTMLResponse:
    """Frame action endpoint; always answers 200 with frame HTML."""
    body = await request.body()
    try:
        payload = json.loads(body or b"{}")
    except ValueError:
        LOGGER.info("Frame post with non-JSON body")
        payload = {}
    return HTMLResponse(build_frame_response(payload), status_code=200)


# For running directly: python web_app.py
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
