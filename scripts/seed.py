"""Database seeder with the sample news platform data set."""
import asyncio
import argparse
import time
from app.database import engine, async_session, Base
from app.models import User, Category, Article, Comment
from app.services.auth_service import hash_password

USERS = ["alice", "ben", "carla", "daniel", "emma", "felix"]

CATEGORIES = [
    ("Climate", "Positive developments and solutions for the climate"),
    ("Politics", "Constructive political progress around the world"),
    ("Aid", "Humanitarian aid and global cooperation stories"),
]

# (title, body, category index, submitter index)
ARTICLES = [
    ("New Solar Park Opens", "A new solar park is providing clean energy to thousands.", 0, 0),
    ("Cities Go Green", "More cities are investing in green public transport.", 0, 1),
    ("Ocean Cleanup Success", "Volunteers removed tons of plastic from coastal waters.", 0, 2),
    ("Peace Talks Progress", "Countries report positive outcomes from peace talks.", 1, 3),
    ("Voter Turnout Rises", "Recent elections saw record-high voter participation.", 1, 4),
    ("Anti-Corruption Reform", "New transparency laws were passed successfully.", 1, 5),
    ("Aid Reaches Flood Victims", "Emergency aid has reached affected communities.", 2, 0),
    ("Global Food Program Expanded", "More families now receive food assistance.", 2, 1),
    ("Medical Teams Deployed", "Doctors arrived quickly to help remote regions.", 2, 2),
]

# (content, article index, user index)
COMMENTS = [
    ("This is really encouraging news!", 0, 1),
    ("Great to see progress like this.", 0, 2),
    ("Green transport makes a big difference.", 1, 3),
    ("Hope more cities follow this example.", 1, 4),
    ("Amazing work by the volunteers!", 2, 5),
    ("The oceans really need this.", 2, 0),
    ("Peace is always worth working for.", 3, 1),
    ("This gives me hope.", 3, 2),
    ("High turnout shows strong democracy.", 4, 3),
    ("People clearly care about change.", 4, 5),
    ("Transparency is so important.", 5, 0),
    ("Glad to see reforms happening.", 5, 1),
    ("Happy help is reaching people quickly.", 6, 2),
    ("Aid coordination really matters.", 6, 3),
    ("Food security is essential.", 7, 4),
    ("This program saves lives.", 7, 5),
    ("Medical support is always needed.", 8, 0),
    ("Big respect for the medical teams.", 8, 1),
]


async def seed(password: str, reset: bool = False):
    print(f"Seeding: {len(USERS)} users, {len(CATEGORIES)} categories, "
          f"{len(ARTICLES)} articles, {len(COMMENTS)} comments")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        password_hash = hash_password(password)
        users = [
            User(username=name, email=f"{name}@example.com", password_hash=password_hash)
            for name in USERS
        ]
        session.add_all(users)

        categories = [Category(name=name, description=desc) for name, desc in CATEGORIES]
        session.add_all(categories)
        await session.flush()

        articles = [
            Article(
                title=title,
                body=body,
                category_id=categories[cat].id,
                submitter_id=users[sub].id,
            )
            for title, body, cat, sub in ARTICLES
        ]
        session.add_all(articles)
        await session.flush()

        session.add_all([
            Comment(content=content, article_id=articles[art].id, user_id=users[usr].id)
            for content, art, usr in COMMENTS
        ])
        await session.commit()

    await engine.dispose()
    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Log in as any of {', '.join(USERS)} (<name>@example.com) with the seed password")


def main():
    parser = argparse.ArgumentParser(description="Seed the news platform database")
    parser.add_argument("--password", default="Password#1", help="Password shared by every seeded user")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()
    asyncio.run(seed(args.password, reset=args.reset))


if __name__ == "__main__":
    main()
