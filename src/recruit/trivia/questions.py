"""Built-in question bank served when the trivia_questions table is empty or unreachable."""

from __future__ import annotations

from recruit.trivia.engine import Question

BACKUP_QUESTIONS: list[Question] = [
    Question(
        id="sf-1",
        question="What year was the Golden Gate Bridge completed?",
        options=["1937", "1927", "1947", "1957"],
        correct_answer=0,
        explanation="The Golden Gate Bridge was completed in 1937 after four years of construction.",
        difficulty="easy",
        category="landmarks",
        image_url="/golden-gate-bridge.png",
        image_alt="The Golden Gate Bridge in San Francisco",
    ),
    Question(
        id="sf-2",
        question="Which famous prison is located on an island in San Francisco Bay?",
        options=["Rikers Island", "San Quentin", "Alcatraz", "Folsom"],
        correct_answer=2,
        explanation="Alcatraz Federal Penitentiary operated from 1934 to 1963 on Alcatraz Island in San Francisco Bay.",
        difficulty="easy",
        category="landmarks",
        image_url="/alcatraz-prison-san-francisco.png",
        image_alt="Alcatraz prison on its island in San Francisco Bay",
    ),
    Question(
        id="sf-3",
        question="What was the name of the 1906 natural disaster that devastated San Francisco?",
        options=["Great Quake", "San Francisco Tremor", "Golden Gate Disaster", "California Shaker"],
        correct_answer=0,
        explanation="The Great Quake of 1906 caused devastating fires and destroyed over 80% of the city.",
        difficulty="medium",
        category="history",
        image_url="/1906-san-francisco-earthquake.png",
        image_alt="Aftermath of the 1906 San Francisco earthquake",
    ),
    Question(
        id="sf-4",
        question="Which famous San Francisco neighborhood is known for its LGBT history and activism?",
        options=["Haight-Ashbury", "Mission District", "Castro", "North Beach"],
        correct_answer=2,
        explanation="The Castro District has been the center of LGBT activism and culture in San Francisco since the 1960s.",
        difficulty="medium",
        category="culture",
        image_url="/castro-district-san-francisco.png",
        image_alt="The iconic Castro Theater in San Francisco's Castro District",
    ),
    Question(
        id="sf-5",
        question="What is the name of San Francisco's famous cable car system?",
        options=["Market Street Railway", "Muni Metro", "BART", "San Francisco Municipal Railway"],
        correct_answer=3,
        explanation=(
            "San Francisco Municipal Railway (Muni) operates the historic cable car system, "
            "the last manually operated cable car system in the world."
        ),
        difficulty="easy",
        category="transportation",
        image_url="/san-francisco-cable-car.png",
        image_alt="A San Francisco cable car climbing up a hill",
    ),
    Question(
        id="sf-football-001",
        question="Which NFL team plays its home games in San Francisco?",
        options=["49ers", "Raiders", "Giants", "Warriors"],
        correct_answer=0,
        explanation="The San Francisco 49ers are the NFL team based in San Francisco.",
        difficulty="easy",
        category="sports",
        image_url="/levis-stadium-49ers.png",
        image_alt="Levi's Stadium, home of the San Francisco 49ers",
    ),
    Question(
        id="sf-football-002",
        question="What is the name of the 49ers' home stadium?",
        options=["Candlestick Park", "Levi's Stadium", "Oracle Park", "AT&T Park"],
        correct_answer=1,
        explanation="The 49ers moved to Levi's Stadium in Santa Clara in 2014.",
        difficulty="easy",
        category="sports",
    ),
    Question(
        id="sf-football-003",
        question="How many Super Bowl titles have the 49ers won?",
        options=["3", "4", "5", "6"],
        correct_answer=2,
        explanation="The 49ers won Super Bowls in 1981, 1984, 1988, 1989, and 1994.",
        difficulty="medium",
        category="sports",
    ),
    Question(
        id="sf-football-004",
        question="Which legendary coach led the 49ers to multiple Super Bowl victories?",
        options=["Bill Walsh", "Joe Montana", "Steve Young", "Jerry Rice"],
        correct_answer=0,
        explanation="Bill Walsh coached the 49ers to three Super Bowl victories and revolutionized offensive football.",
        difficulty="medium",
        category="sports",
    ),
    Question(
        id="sf-football-005",
        question="What was the 49ers' previous home stadium before Levi's Stadium?",
        options=["Kezar Stadium", "Candlestick Park", "Oakland Coliseum", "Cow Palace"],
        correct_answer=1,
        explanation="The 49ers played at Candlestick Park from 1971 to 2013.",
        difficulty="medium",
        category="sports",
    ),
]

BACKUP_BY_ID: dict[str, Question] = {q.id: q for q in BACKUP_QUESTIONS}
