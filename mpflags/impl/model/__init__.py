from .entity import ModelEntity
from .flag_definition import *
