import pytest

from recipeshare.services.query import RecipeQuery, query_recipes


@pytest.fixture
def abc(make_recipe):
    a = make_recipe("A", offset_days=-2, ratings=(), id="a")
    b = make_recipe("B", offset_days=-1, ratings=(5,), id="b")
    c = make_recipe("C", offset_days=0, ratings=(), id="c")
    return [a, b, c]


def ids(recipes):
    return [r.id for r in recipes]


def test_default_sort_is_newest(abc):
    assert ids(query_recipes(abc, RecipeQuery())) == ["c", "b", "a"]


def test_oldest(abc):
    assert ids(query_recipes(abc, RecipeQuery(sort="oldest"))) == ["a", "b", "c"]


def test_rating_sort_is_stable(abc):
    # A y C empatan a 0: conservan el orden previo
    assert ids(query_recipes(abc, RecipeQuery(sort="rating"))) == ["b", "a", "c"]


def test_rating_sort_non_increasing(make_recipe):
    recipes = [
        make_recipe("x", ratings=(2, 3)),
        make_recipe("y", ratings=()),
        make_recipe("z", ratings=(5, 4)),
        make_recipe("w", ratings=(1,)),
    ]
    out = query_recipes(recipes, RecipeQuery(sort="rating"))
    avgs = [r.mean_rating() for r in out]
    assert avgs == sorted(avgs, reverse=True)
    assert out[-1].title == "y"


def test_category_filter(abc, make_recipe):
    dessert = make_recipe("Cake", category="Dessert", id="d")
    recipes = abc + [dessert]
    assert ids(query_recipes(recipes, RecipeQuery(category="Dessert"))) == ["d"]
    assert len(query_recipes(recipes, RecipeQuery(category="All"))) == 4
    assert query_recipes(abc, RecipeQuery(category="Dessert")) == []


@pytest.mark.parametrize("needle", ["pasta", "PASTA", "Past"])
def test_search_matches_title_description_or_tag(make_recipe, needle):
    by_title = make_recipe("Pasta Bake", id="t")
    by_desc = make_recipe("Bake", description="A quick pasta dish for weeknights", id="d")
    by_tag = make_recipe("Dinner", tags=["Italian", "Pasta"], id="g")
    other = make_recipe("Salad", id="o")
    out = query_recipes([by_title, by_desc, by_tag, other], RecipeQuery(search=needle, sort="oldest"))
    assert ids(out) == ["t", "d", "g"]


def test_search_and_category_are_conjunctive(make_recipe):
    soup = make_recipe("Pasta Soup", category="Soup", id="s")
    dinner = make_recipe("Pasta Dinner", category="Dinner", id="d")
    out = query_recipes([soup, dinner], RecipeQuery(search="pasta", category="Dinner"))
    assert ids(out) == ["d"]


def test_blank_search_is_no_filter(abc):
    assert len(query_recipes(abc, RecipeQuery(search="   "))) == 3


def test_query_does_not_mutate_input(abc):
    before = ids(abc)
    query_recipes(abc, RecipeQuery(sort="oldest", category="Dessert"))
    assert ids(abc) == before
