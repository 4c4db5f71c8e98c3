from fastapi import Request

from storefront.services.event_processor import IntegrationServices


def get_services(request: Request) -> IntegrationServices:
    """Dependency returning the services built in the app lifespan."""
    return request.app.state.services
