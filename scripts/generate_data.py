# scripts/generate_data.py
from __future__ import annotations
from pathlib import Path
import numpy as np
import pandas as pd

from src.config import INTERESTS

rng = np.random.default_rng(42)

BASE = Path("data")

N_PROFILES = 3000
GRADYEARS = [2006, 2007, 2008, 2009]
GENDERS = ["F", "M"]

# planted interest archetypes: keyword -> extra mean mentions
ARCHETYPES = {
    "athletes": {"basketball": 1.2, "football": 1.0, "soccer": 0.8, "softball": 0.6,
                 "volleyball": 0.7, "sports": 0.9, "baseball": 0.5},
    "princesses": {"shopping": 1.5, "mall": 1.0, "clothes": 0.9, "hair": 1.2,
                   "dress": 0.6, "cute": 1.0, "hollister": 0.4, "abercrombie": 0.4},
    "faithful": {"god": 1.2, "church": 0.9, "jesus": 0.8, "bible": 0.5},
    "criminals": {"drunk": 0.6, "drugs": 0.5, "die": 0.8, "death": 0.6, "sex": 1.0, "kissed": 0.6},
    "basket_cases": {},
}
ARCHETYPE_WEIGHTS = [0.15, 0.15, 0.1, 0.05, 0.55]
BASE_RATE = 0.15


def _age_for(gradyear: int) -> float:
    # seniors in 2009 are ~18
    return float(18 - (gradyear - 2006) + rng.uniform(0.0, 1.0))


def gen_profiles(n=N_PROFILES, age_missing=0.08, age_outlier=0.02, gender_missing=0.09):
    names = list(ARCHETYPES)
    rows = []
    for _ in range(n):
        gradyear = int(rng.choice(GRADYEARS))
        archetype = ARCHETYPES[names[rng.choice(len(names), p=ARCHETYPE_WEIGHTS)]]

        u = rng.random()
        if u < age_missing:
            age = np.nan
        elif u < age_missing + age_outlier:
            age = float(rng.choice([3.086, 5.5, 36.2, 106.927]))
        else:
            age = round(_age_for(gradyear), 3)

        if rng.random() < gender_missing:
            gender = None
        else:
            gender = GENDERS[0] if rng.random() < 0.8 else GENDERS[1]

        row = dict(gradyear=gradyear, gender=gender, age=age, friends=int(rng.poisson(30)))
        for kw in INTERESTS:
            row[kw] = int(rng.poisson(BASE_RATE + archetype.get(kw, 0.0)))
        rows.append(row)
    return pd.DataFrame(rows)


def main():
    BASE.mkdir(parents=True, exist_ok=True)
    profiles = gen_profiles()
    profiles.to_csv(BASE / "profiles.csv", index=False)
    print(f"Mock profiles written to {BASE}")


if __name__ == "__main__":
    main()
