"""
Backend recipe: a single-stage image that runs the detected entry file.
"""

from typing import Dict

from ..analyzer.profile import BackendTech, Technology
from .base import BuildArtifact, render


NODE_DOCKERFILE = """# Backend (nodejs)
FROM node:18-alpine
WORKDIR /app
COPY package*.json ./
RUN npm install --omit=dev
COPY . ./
ENV PORT={{PORT}}
EXPOSE {{PORT}}
CMD ["node", "{{ENTRY}}"]
"""

FLASK_DOCKERFILE = """# Backend (python-flask)
FROM python:3.11-slim
WORKDIR /app
COPY requirements.txt ./
RUN pip install --no-cache-dir -r requirements.txt
COPY . ./
ENV PORT={{PORT}}
ENV FLASK_RUN_HOST=0.0.0.0
ENV FLASK_RUN_PORT={{PORT}}
EXPOSE {{PORT}}
CMD ["python", "{{ENTRY}}"]
"""

TEMPLATES: Dict[str, str] = {
    BackendTech.NODEJS.value: NODE_DOCKERFILE,
    BackendTech.PYTHON_FLASK.value: FLASK_DOCKERFILE,
}

DEFAULT_ENTRIES: Dict[str, str] = {
    BackendTech.NODEJS.value: "server.js",
    BackendTech.PYTHON_FLASK.value: "app.py",
}


def supports(backend: str) -> bool:
    return backend in TEMPLATES


def backend_dockerfile(backend: Technology, port: int, directory: str) -> BuildArtifact:
    entry = backend.details.get("entry") or DEFAULT_ENTRIES[backend.name]
    content = render(TEMPLATES[backend.name], {"PORT": port, "ENTRY": entry})
    return BuildArtifact(f"{directory}/Dockerfile", content)
