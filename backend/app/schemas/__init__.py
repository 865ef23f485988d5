"""Pydantic schemas for the StairProperty CRM API."""

from app.schemas.auth import *
from app.schemas.organisation import *
from app.schemas.property import *
from app.schemas.valuation import *
from app.schemas.tenant import *
from app.schemas.staircasing import *
from app.schemas.campaign import *
from app.schemas.provider import *
from app.schemas.feedback import *
from app.schemas.insight import *
from app.schemas.dashboard import *
