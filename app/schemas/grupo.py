from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class GrupoBase(BaseModel):
    group_name: str = Field(..., min_length=1, max_length=100)
    tour_datetime: Optional[datetime] = None
    max_members: int = Field(15, gt=0)
    bethel_code: Optional[str] = None

class GrupoCreate(GrupoBase):
    pass

class GrupoUpdate(BaseModel):
    group_name: Optional[str] = Field(None, min_length=1, max_length=100)
    tour_datetime: Optional[datetime] = None
    max_members: Optional[int] = Field(None, gt=0)
    bethel_code: Optional[str] = None
    captain_passenger_id: Optional[int] = None

class MiembroResponse(BaseModel):
    id: int
    passenger_id: int
    reservation_id: int
    first_name: str
    last_name: str
    reservation_code: str

class GrupoResponse(GrupoBase):
    id: int
    captain_passenger_id: Optional[int] = None
    members_count: int = 0
    members: List[MiembroResponse] = []

class AsignarMiembros(BaseModel):
    passenger_ids: List[int] = Field(..., min_length=1)

class PasajeroElegible(BaseModel):
    id: int
    first_name: str
    last_name: str
    congregation: Optional[str] = None
    reservation_id: int
    reservation_code: str
    responsible_phone: str

class CompaneroGrupo(BaseModel):
    first_name: str
    last_name: str

class InfoGrupo(BaseModel):
    group_name: str
    tour_datetime: Optional[datetime] = None
    members: List[CompaneroGrupo] = []

class MiGrupoPasajero(BaseModel):
    first_name: str
    last_name: str
    reservation_code: str
    group: Optional[InfoGrupo] = None
