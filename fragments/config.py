"""Configuration settings for the Fragments service."""

import os

from common.constants import MAX_FRAGMENT_SIZE_BYTES


FRAGMENTS_HOST = os.environ.get("FRAGMENTS_HOST", "0.0.0.0")

FRAGMENTS_PORT = int(os.environ.get("PORT", "8080"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

HTPASSWD_FILE = os.environ.get("HTPASSWD_FILE")

API_URL = os.environ.get("API_URL")

AWS_S3_BUCKET_NAME = os.environ.get("AWS_S3_BUCKET_NAME")

AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")

AWS_S3_ENDPOINT_URL = os.environ.get("AWS_S3_ENDPOINT_URL")

# Metadata stays in process memory unless a database path is given
FRAGMENTS_DATABASE_PATH = os.environ.get("FRAGMENTS_DATABASE_PATH")

MAX_FRAGMENT_SIZE = int(os.environ.get("MAX_FRAGMENT_SIZE", str(MAX_FRAGMENT_SIZE_BYTES)))

# Reported by the health route
AUTHOR = os.environ.get("FRAGMENTS_AUTHOR", "Furqan Khurrum")

GITHUB_URL = os.environ.get("FRAGMENTS_GITHUB_URL", "https://github.com/FurqanKhurrum/fragments")
