"""FastAPI dependency injection factories."""

from typing import Annotated

from fastapi import Depends

from food_image_enhancer.core.config import Settings, get_settings
from food_image_enhancer.services.endpoint_registry import (
    EndpointRegistry,
    get_endpoint_registry,
)
from food_image_enhancer.services.enhancer import (
    EnhancementService,
    get_enhancement_service,
)

# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
RegistryDep = Annotated[EndpointRegistry, Depends(get_endpoint_registry)]
EnhancementServiceDep = Annotated[EnhancementService, Depends(get_enhancement_service)]
