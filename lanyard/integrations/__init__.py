"""Transport integrations.

Import the one you need directly, e.g. ``lanyard.integrations.fastapi``;
they depend on optional extras.
"""
