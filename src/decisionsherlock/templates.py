from __future__ import annotations

from typing import Dict, List

from decisionsherlock.schemas import Criterion, DecisionSpec, Option


def _criteria(*items: tuple[str, str, int]) -> List[Criterion]:
    return [Criterion(id=cid, name=name, weight=w) for cid, name, w in items]


def _two_options(a: str, b: str) -> List[Option]:
    return [Option(id="o1", name=a), Option(id="o2", name=b)]


def templates() -> Dict[str, DecisionSpec]:
    return {
        "job_offers": DecisionSpec(
            title="Job Offer A vs Job Offer B",
            description="Compare two job offers for salary, growth, commute and culture.",
            criteria=_criteria(
                ("salary", "Salary", 9),
                ("growth", "Career Growth", 7),
                ("commute", "Commute", 6),
                ("culture", "Culture", 6),
            ),
            options=_two_options("Job Offer A", "Job Offer B"),
        ),
        "real_estate": DecisionSpec(
            title="Apartment A vs Apartment B",
            description="Compare two rental apartments for rent, size, location and amenities.",
            criteria=_criteria(
                ("rent", "Rent", 9),
                ("location", "Location", 8),
                ("size", "Size", 6),
                ("amenities", "Amenities", 5),
            ),
            options=_two_options("Apartment A", "Apartment B"),
        ),
        "travel": DecisionSpec(
            title="Trip Option A vs Trip Option B",
            description="Compare two travel plans based on cost, convenience, experience and duration.",
            criteria=_criteria(
                ("cost", "Cost", 8),
                ("experience", "Experience", 7),
                ("time", "Time/Dur", 6),
                ("convenience", "Convenience", 5),
            ),
            options=_two_options("Trip A", "Trip B"),
        ),
        "gadgets": DecisionSpec(
            title="Phone A vs Phone B",
            description="Compare two smartphones for price, battery, camera, and ecosystem.",
            criteria=_criteria(
                ("price", "Price", 8),
                ("battery", "Battery", 7),
                ("camera", "Camera", 7),
                ("ecosystem", "Ecosystem", 5),
            ),
            options=_two_options("Phone A", "Phone B"),
        ),
    }


def get_template(name: str) -> DecisionSpec:
    all_templates = templates()
    if name not in all_templates:
        raise KeyError(f"Unknown template {name!r}. Available: {', '.join(sorted(all_templates))}")
    return all_templates[name]
