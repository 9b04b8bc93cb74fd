"""
Modèles de données du bridge.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Frame:
    """
    Un couple (event, data) décodé depuis le stream SSE.

    `event_type` vaut "" si une ligne `data:` arrive avant toute ligne `event:`.
    Construit par le décodeur, consommé immédiatement par le dispatcher.
    """
    event_type: str
    data: str
