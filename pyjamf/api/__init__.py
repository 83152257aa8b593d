from .definitions import (
    DataType, InputType, DeclaredType, ExtensionAttributeDefinition, DefinitionRegistry)
from .connection import APIConnection, StaticConnection
from .classic import ClassicObject, IdName, ExtensionAttributeValue
from .mixins import Extendable, Sitable, Categorizable, Immutable
from .schemas import (
    Computer, ComputerGeneral, ConfigurationProfile, ProfileGeneral, SoftwareUpdateServer,
    PrestagePurchasingInformation, ExtensionAttributeMigrationMappingChange)
