from __future__ import annotations

from datetime import timedelta
from typing import List

from ..models import Comment, Rating, Recipe, now_utc
from ..store import RecipeStore

DAY = timedelta(days=1)


def demo_recipes() -> List[Recipe]:
    now = now_utc()
    return [
        Recipe(
            title="Classic Spaghetti Carbonara",
            description="A creamy, classic Italian pasta dish made with eggs, cheese, pancetta, and pepper. Ready in just 30 minutes!",
            image_url="https://picsum.photos/seed/carbonara/800/600",
            ingredients=["200g spaghetti", "100g pancetta", "2 large eggs", "50g Pecorino cheese", "Salt and black pepper"],
            instructions=[
                "Cook spaghetti according to package directions.",
                "While pasta cooks, fry pancetta until crisp.",
                "In a bowl, whisk eggs and cheese.",
                "Drain pasta, reserving some pasta water. Quickly mix in egg mixture, pancetta, and a splash of pasta water.",
                "Season with lots of black pepper and serve immediately.",
            ],
            category="Dinner",
            prep_time=10,
            cook_time=20,
            servings=4,
            difficulty="Medium",
            author_id="user-2",
            author_name="Maria Rossi",
            created_at=now - 2 * DAY,
            updated_at=now - 2 * DAY,
            comments=[
                Comment(id="c1", author_id="user-1", author_name="Alex Cook", text="This was delicious!", created_at=now),
            ],
            ratings=[Rating(user_id="user-1", value=5), Rating(user_id="user-3", value=4)],
            tags=["Italian", "Pasta", "Quick"],
        ),
        Recipe(
            title="Fudgy Chocolate Brownies",
            description="The ultimate fudgy brownies with a crinkly top. Intensely chocolatey and incredibly moist.",
            image_url="https://picsum.photos/seed/brownies/800/600",
            ingredients=[
                "1/2 cup butter, melted", "1 cup sugar", "2 eggs", "1 tsp vanilla extract",
                "1/3 cup cocoa powder", "1/2 cup flour", "1/4 tsp salt", "1/4 tsp baking powder",
            ],
            instructions=[
                "Preheat oven to 350°F (175°C).",
                "Mix melted butter, sugar, eggs, and vanilla.",
                "In a separate bowl, sift together cocoa, flour, salt, and baking powder.",
                "Gradually add dry ingredients to wet ingredients.",
                "Pour into a greased 8-inch square pan.",
                "Bake for 20-25 minutes. Let cool completely before cutting.",
            ],
            category="Dessert",
            author_id="user-1",
            author_name="Alex Cook",
            created_at=now - DAY,
            updated_at=now - DAY,
            ratings=[Rating(user_id="user-2", value=5)],
            tags=["Chocolate", "Baking"],
        ),
        Recipe(
            title="Vegan Lentil Soup",
            description="A hearty and nutritious vegan lentil soup that is packed with flavor and plant-based protein.",
            image_url="https://picsum.photos/seed/lentilsoup/800/600",
            ingredients=[
                "1 tbsp olive oil", "1 onion, chopped", "2 carrots, chopped", "2 celery stalks, chopped",
                "2 cloves garlic, minced", "1 cup brown or green lentils, rinsed", "4 cups vegetable broth",
                "1 (14.5 ounce) can diced tomatoes", "1 tsp dried thyme", "Salt and pepper to taste",
            ],
            instructions=[
                "Heat olive oil in a large pot over medium heat.",
                "Add onion, carrots, and celery and cook until softened.",
                "Stir in garlic and cook for 1 minute more.",
                "Add lentils, vegetable broth, tomatoes, and thyme.",
                "Bring to a boil, then reduce heat and simmer for 40-50 minutes, or until lentils are tender.",
                "Season with salt and pepper before serving.",
            ],
            category="Vegan",
            author_id="user-3",
            author_name="Sam Vegan",
            created_at=now,
            updated_at=now,
            ratings=[Rating(user_id="user-1", value=4), Rating(user_id="user-2", value=4)],
            tags=["Soup", "Healthy"],
        ),
    ]


def seed_demo(store: RecipeStore) -> int:
    recipes = demo_recipes()
    for r in recipes:
        store.insert(r)
    return len(recipes)
