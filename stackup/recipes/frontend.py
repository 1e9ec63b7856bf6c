"""
Frontend recipe: multi-stage build of the static bundle, served by nginx.
"""

from typing import Dict

from ..analyzer.profile import FrontendTech
from .base import BuildArtifact, render


FRONTEND_DOCKERFILE = """# Frontend ({{TECH}}): build static assets, then serve them with nginx
FROM node:18-alpine AS build
WORKDIR /app
COPY package*.json ./
RUN npm install
COPY . ./
RUN npm run build{{COLLECT}}

FROM nginx:alpine
COPY --from=build {{OUTPUT_DIR}} /usr/share/nginx/html
EXPOSE 80
CMD ["nginx", "-g", "daemon off;"]
"""

# Angular nests its bundle under dist/<project>[/browser]; flatten it
ANGULAR_COLLECT = (
    " \\\n    && mkdir -p /app/site"
    " \\\n    && cp -r \"$(dirname \"$(find dist -name index.html | head -n 1)\")/.\" /app/site/"
)

BUILD_OUTPUT: Dict[str, str] = {
    FrontendTech.REACT.value: "/app/build",
    FrontendTech.REACT_VITE.value: "/app/dist",
    FrontendTech.VUE.value: "/app/dist",
    FrontendTech.ANGULAR.value: "/app/site",
}


def supports(frontend: str) -> bool:
    return frontend in BUILD_OUTPUT


def frontend_dockerfile(frontend: str, directory: str) -> BuildArtifact:
    content = render(FRONTEND_DOCKERFILE, {
        "TECH": frontend,
        "COLLECT": ANGULAR_COLLECT if frontend == FrontendTech.ANGULAR.value else "",
        "OUTPUT_DIR": BUILD_OUTPUT[frontend],
    })
    return BuildArtifact(f"{directory}/Dockerfile", content)
