"""
nginx configuration for the frontend container: static files at /, the
backend under /api/.
"""

from .base import BuildArtifact, render

PROXY_CONFIG_PATH = "nginx.conf"
API_PREFIX = "/api/"

NGINX_CONF = """server {
    listen 80;
    server_name _;

    root /usr/share/nginx/html;
    index index.html;

    location {{API_PREFIX}} {
        proxy_pass http://{{BACKEND_HOST}}:{{BACKEND_PORT}};
        proxy_http_version 1.1;
        proxy_set_header Host $host;
        proxy_set_header X-Real-IP $remote_addr;
        proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;
        proxy_set_header X-Forwarded-Proto $scheme;
    }

    location / {
        try_files $uri $uri/ /index.html;
    }
}
"""


def proxy_config(backend_port: int, backend_host: str = "backend") -> BuildArtifact:
    content = render(NGINX_CONF, {
        "API_PREFIX": API_PREFIX,
        "BACKEND_HOST": backend_host,
        "BACKEND_PORT": backend_port,
    })
    return BuildArtifact(PROXY_CONFIG_PATH, content)
