"""idshield: creates Keycloak groups/capabilities over HTTP.

To use the Flask app:
    from idshield.flask_app import create_app

To use the pipeline without Flask:
    from idshield.core.orchestrator import CreateGroupHandler
"""
# Note: flask_app is not imported here so idshield.core stays usable without Flask
