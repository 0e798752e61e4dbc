# ==============================================
# Fluent Bit → MongoDB Bridge
# ==============================================
#
# Package Structure:
#
# fluentbridge/
# ├── normalization/    # Turn raw forwarder records into canonical documents
# ├── storage/          # Shared MongoDB client
# ├── ingest.py         # Decode → normalize → store, one write per request
# ├── app.py            # Flask app: /ingest, /healthz, /health
# ├── config.py         # Configuration management
# ├── errors.py         # Exception hierarchy
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
