"""
Emergency scenario catalogue for emergency action plans (ADEP).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Scenario(BaseModel):
    id: str
    name: str
    risk_level: Literal["low", "medium", "high", "critical"]
    estimated_duration: int = Field(..., description="Minutes")
    required_equipment: list[str] = Field(default_factory=list)
    responsible_team: Literal["fire_fighting", "rescue", "protection", "first_aid"]
    procedures: list[str] = Field(default_factory=list)


SCENARIOS: list[Scenario] = [
    Scenario(
        id="yangin",
        name="Yangın",
        risk_level="critical",
        estimated_duration=15,
        required_equipment=["Yangın söndürücü", "Yangın battaniyesi", "Duman maskesi"],
        responsible_team="fire_fighting",
        procedures=[
            "Sound the fire alarm",
            "Call the fire brigade (110) with location and type of fire",
            "Switch off the main electrical panel",
            "Fire-fighting team starts first response (P.A.S.S.)",
            "Protection team keeps evacuation routes clear",
            "First-aid team checks for casualties",
            "Direct all staff to the assembly area and take a roll call",
        ],
    ),
    Scenario(
        id="deprem",
        name="Deprem",
        risk_level="critical",
        estimated_duration=30,
        required_equipment=["Acil çanta", "El feneri", "İlk yardım çantası", "Telsiz"],
        responsible_team="rescue",
        procedures=[
            "Drop, cover and hold on while shaking lasts",
            "Keep away from windows and shelving",
            "Do not use lifts",
            "Leave through emergency exits once shaking stops",
            "Shut off electricity, gas and water valves",
            "Gather at the assembly area for roll call",
            "Report trapped persons to the rescue team and call AFAD (112)",
        ],
    ),
    Scenario(
        id="kimyasal",
        name="Kimyasal Sızıntı",
        risk_level="critical",
        estimated_duration=20,
        required_equipment=["Kimyasal eldiven", "Gaz maskesi", "Emici malzeme", "Nötrleştirici"],
        responsible_team="protection",
        procedures=[
            "Identify the source without approaching it",
            "Isolate the area and post warning signs",
            "Call emergency services (112) and AFAD",
            "Shut down ventilation to limit spread",
            "Contain the spill with absorbent material",
            "Decontaminate exposed persons",
            "Obtain the safety data sheet for the substance",
        ],
    ),
    Scenario(
        id="gaz_kacagi",
        name="Doğalgaz Kaçağı",
        risk_level="high",
        estimated_duration=10,
        required_equipment=["Gaz dedektörü", "Yangın söndürücü", "İzole eldiven"],
        responsible_team="fire_fighting",
        procedures=[
            "Do not operate electrical switches",
            "Open doors and windows",
            "Close the main gas valve",
            "Call the gas distribution emergency line",
            "Evacuate the building and wait at the assembly area",
        ],
    ),
    Scenario(
        id="sel",
        name="Su Baskını / Sel",
        risk_level="high",
        estimated_duration=25,
        required_equipment=["Su pompası", "Kum torbası", "Bot", "Can yeleği"],
        responsible_team="rescue",
        procedures=[
            "Switch off the electrical panel",
            "Evacuate basement and ground floors",
            "Move documents and valuables upstairs",
            "Place sandbags at doors and windows",
            "Call AFAD (112) and report the water level",
        ],
    ),
    Scenario(
        id="elektrik",
        name="Elektrik Arızası / Yangın",
        risk_level="high",
        estimated_duration=12,
        required_equipment=["Kuru kimyevi söndürücü (CO2)", "İzole eldiven", "El feneri"],
        responsible_team="fire_fighting",
        procedures=[
            "Switch off the main breaker",
            "Call the fire brigade (110) and the electricity distributor",
            "Never use water on electrical fires",
            "Use CO2 or dry chemical extinguishers",
            "Call 112 for electric shock casualties and start CPR",
        ],
    ),
    Scenario(
        id="bomba_ihbari",
        name="Bomba İhbarı",
        risk_level="critical",
        estimated_duration=45,
        required_equipment=["Telsiz", "Şüpheli paket tanıma rehberi"],
        responsible_team="protection",
        procedures=[
            "Take the threat seriously and record caller details",
            "Call the police (155) and AFAD (112)",
            "Evacuate quietly without causing panic",
            "Do not touch or move suspicious packages",
            "Keep a 500 metre safety perimeter",
        ],
    ),
    Scenario(
        id="is_kazasi",
        name="İş Kazası / Yaralanma",
        risk_level="medium",
        estimated_duration=8,
        required_equipment=["İlk yardım çantası", "Sedye", "AED cihazı"],
        responsible_team="first_aid",
        procedures=[
            "Make the scene safe and stop machinery",
            "Check the casualty's consciousness",
            "Call emergency services (112)",
            "Control bleeding with direct pressure",
            "Do not move the casualty if spinal injury is suspected",
            "Notify the social security institution within 3 days",
        ],
    ),
    Scenario(
        id="pandemi",
        name="Salgın Hastalık / Pandemi",
        risk_level="medium",
        estimated_duration=60,
        required_equipment=["Maske", "Dezenfektan", "Ateş ölçer", "İzolasyon odası"],
        responsible_team="first_aid",
        procedures=[
            "Isolate persons showing symptoms",
            "Call the health ministry line (184)",
            "Trace and follow up contacts",
            "Disinfect common areas",
            "Enforce distancing and hygiene rules",
        ],
    ),
    Scenario(
        id="siddetli_hava",
        name="Fırtına / Şiddetli Hava",
        risk_level="medium",
        estimated_duration=20,
        required_equipment=["Jeneratör", "El feneri", "Battaniye", "Su bidonu"],
        responsible_team="protection",
        procedures=[
            "Follow meteorological warnings",
            "Bring outdoor staff inside",
            "Close and secure doors and windows",
            "Prepare for power cuts",
            "Stay indoors until the storm passes",
        ],
    ),
]

SCENARIOS_BY_ID: dict[str, Scenario] = {s.id: s for s in SCENARIOS}


def known_scenario_ids(selected: Any) -> list[str]:
    """Selected ids that exist in the catalogue, in selection order."""
    if not isinstance(selected, list):
        return []
    return [s for s in selected if isinstance(s, str) and s in SCENARIOS_BY_ID]


def selected_scenarios(selected: Any) -> list[Scenario]:
    return [SCENARIOS_BY_ID[s] for s in known_scenario_ids(selected)]
