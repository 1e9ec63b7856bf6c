"""
.dockerignore content, identical for every stack. Docker reads it from the root
of each build context, so a copy goes into every role directory as well as
the checkout root.
"""

from .base import BuildArtifact

DOCKERIGNORE_PATH = ".dockerignore"

DOCKERIGNORE = """# dependencies and logs
node_modules
logs
*.log

# secrets
.env
.env.*

# build outputs
build/
dist/
.next/
out/
.cache/

# editor and OS files
.vscode/
.idea/
.DS_Store
Thumbs.db

# version control
.git
.gitignore

# python
__pycache__/
*.pyc
*.pyo
*.pyd
venv/
.venv/

# php
vendor/
"""


def dockerignore(directory: str = "") -> BuildArtifact:
    path = f"{directory}/{DOCKERIGNORE_PATH}" if directory else DOCKERIGNORE_PATH
    return BuildArtifact(path, DOCKERIGNORE)
