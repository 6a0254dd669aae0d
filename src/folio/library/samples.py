"""Built-in library used on first launch."""

from __future__ import annotations

from datetime import datetime, timezone

from .models import Book, Folder, ReaderSettings


def _ts(year: int, month: int, day: int) -> float:
    return datetime(year, month, day, tzinfo=timezone.utc).timestamp()


_GATSBY = """Chapter 1

In my younger and more vulnerable years my father gave me some advice that I've carried with me ever since.

"Whenever you feel like criticizing anyone," he told me, "just remember that all the people in this world haven't had the advantages that you've had."

He didn't say any more, but we've always been unusually communicative in a reserved way, and I understood that he meant a great deal more than that. In consequence, I'm inclined to reserve all judgments, a habit that has opened up many curious natures to me and also made me the victim of not a few veteran bores.

The abnormal mind is quick to detect and attach itself to this quality when it appears in a normal person, and so it came about that in college I was unjustly accused of being a politician, because I was privy to the secret griefs of wild, unknown men.

Most of the big shore places were closed now and there were hardly any lights except the shadowy, moving glow of a ferryboat across the Sound. And as the moon rose higher the inessential houses began to melt away until gradually I became aware of the old island here that flowered once for Dutch sailors' eyes, a fresh, green breast of the new world.

Chapter 2

About half way between West Egg and New York the motor road hastily joins the railroad and runs beside it for a quarter of a mile, so as to shrink away from a certain desolate area of land. This is a valley of ashes, a fantastic farm where ashes grow like wheat into ridges and hills and grotesque gardens; where ashes take the forms of houses and chimneys and rising smoke and, finally, with a transcendent effort, of men who move dimly and already crumbling through the powdery air.

Occasionally a line of gray cars crawls along an invisible track, gives out a ghastly creak, and comes to rest, and immediately the ash-gray men swarm up with leaden spades and stir up an impenetrable cloud, which screens their obscure operations from your sight. But above the gray land and the spasms of bleak dust which drift endlessly over it, you perceive, after a moment, the eyes of Doctor T. J. Eckleburg."""


def sample_books() -> list[Book]:
    return [
        Book(
            id="1",
            title="The Great Gatsby",
            author="F. Scott Fitzgerald",
            cover="https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=400&h=600&fit=crop",
            content=_GATSBY,
            progress=0.32,
            current_page=58,
            total_pages=180,
            tags=["Classic", "Fiction"],
            last_read=_ts(2024, 5, 20),
            date_added=_ts(2024, 5, 10),
        ),
        Book(
            id="2",
            title="To Kill a Mockingbird",
            author="Harper Lee",
            cover="https://images.unsplash.com/photo-1541963463532-d68292c34b19?w=400&h=600&fit=crop",
            content=(
                "When he was nearly thirteen, my brother Jem got his arm badly "
                "broken at the elbow."
            ),
            progress=0.14,
            current_page=39,
            total_pages=281,
            tags=["Classic", "Fiction"],
            last_read=_ts(2024, 5, 25),
            date_added=_ts(2024, 5, 12),
        ),
        Book(
            id="3",
            title="1984",
            author="George Orwell",
            cover="https://images.unsplash.com/photo-1531901599143-e9858737e9b4?w=400&h=600&fit=crop",
            content=(
                "It was a bright cold day in April, and the clocks were striking "
                "thirteen."
            ),
            progress=0.65,
            current_page=213,
            total_pages=328,
            tags=["Dystopian", "Fiction"],
            last_read=_ts(2024, 5, 15),
            date_added=_ts(2024, 5, 5),
        ),
        Book(
            id="4",
            title="Pride and Prejudice",
            author="Jane Austen",
            cover="https://images.unsplash.com/photo-1610882648335-ced8fc8fa6b5?w=400&h=600&fit=crop",
            content=(
                "It is a truth universally acknowledged, that a single man in "
                "possession of a good fortune, must be in want of a wife."
            ),
            progress=0.08,
            current_page=35,
            total_pages=432,
            tags=["Romance", "Classic"],
            last_read=_ts(2024, 5, 18),
            date_added=_ts(2024, 5, 8),
        ),
    ]


def sample_folders() -> list[Folder]:
    return [
        Folder(id="1", name="Classics", book_ids=["1", "2", "4"], created_at=_ts(2024, 5, 5)),
        Folder(id="2", name="Dystopian", book_ids=["3"], created_at=_ts(2024, 5, 6)),
    ]


def default_settings() -> ReaderSettings:
    return ReaderSettings()
