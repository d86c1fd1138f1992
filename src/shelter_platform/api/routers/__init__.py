"""
shelter_platform.api.routers

HTTP routers, one module per resource.
"""
