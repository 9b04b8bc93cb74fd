"""
Décodage des frames SSE depuis un flux découpé arbitrairement.

Pourquoi un carry buffer:
- httpx livre des chunks dont les frontières ne respectent ni les lignes
  ni les records SSE
- un caractère UTF-8 multi-octets peut lui-même être coupé en deux chunks

Une frame est émise à chaque ligne `data:`, sans attendre la ligne vide qui
termine le record. Un record à plusieurs lignes `data:` produit donc
plusieurs frames au lieu d'un payload multi-lignes.
"""
import codecs
from typing import Iterable, Iterator, List, Optional, Union

from ..core.models import Frame

EVENT_PREFIX = "event:"
DATA_PREFIX = "data:"


class SSEFrameDecoder:
    """
    Reconstruit les frames (event, data) à partir de chunks bytes ou str.

    Le type d'événement en attente persiste d'un record à l'autre: un record
    sans ligne `event:` réutilise le dernier type vu.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._event_type = ""

    @property
    def buffer(self) -> str:
        """Reste non terminé du flux (ne contient jamais de saut de ligne)."""
        return self._buffer

    @property
    def pending_event_type(self) -> str:
        return self._event_type

    def feed(self, chunk: Union[bytes, str]) -> Iterator[Frame]:
        """
        Ajoute un chunk et produit les frames des lignes désormais complètes.

        Args:
            chunk: Morceau brut du stream (bytes) ou déjà décodé (str)

        Yields:
            Frame pour chaque ligne `data:` complète, dans l'ordre
        """
        if isinstance(chunk, bytes):
            text = self._decoder.decode(chunk)
        else:
            text = chunk

        lines = (self._buffer + text).split("\n")
        self._buffer = lines.pop()

        for line in lines:
            frame = self._process_line(line)
            if frame is not None:
                yield frame

    def _process_line(self, line: str) -> Optional[Frame]:
        if line.startswith(EVENT_PREFIX):
            self._event_type = line[len(EVENT_PREFIX):].strip()
            return None
        if line.startswith(DATA_PREFIX):
            return Frame(event_type=self._event_type, data=line[len(DATA_PREFIX):].strip())
        # Lignes vides, id:, retry:, commentaires: ignorés
        return None


def decode_frames(chunks: Iterable[Union[bytes, str]]) -> List[Frame]:
    """Décode une séquence complète de chunks en liste de frames."""
    decoder = SSEFrameDecoder()
    frames: List[Frame] = []
    for chunk in chunks:
        frames.extend(decoder.feed(chunk))
    return frames
