import json
import unittest

import httpx

from cinemood.core.config import Settings
from cinemood.core.exceptions import ConfigurationError, UpstreamError
from cinemood.services.candidates import CandidateFetcher
from cinemood.services.llm_client import LLMClient
from cinemood.services.mood_match import (
    GenerativeMoodRecommender,
    HeuristicMoodRecommender,
    build_recommender,
)
from cinemood.services.ranker import ACCLAIMED_REASON
from fakes import FakeTMDB, movie, ollama_transport, page


def generated(titles, explanation="A gentle, tearful evening."):
    return {
        "picks": [{"title": t, "reason": f"{t} will make you cry."} for t in titles],
        "explanation": explanation,
    }


class TestHeuristicMoodRecommender(unittest.IsolatedAsyncioTestCase):
    async def test_end_to_end(self):
        def discover(request):
            if request.url.params["sort_by"] == "vote_average.desc":
                return httpx.Response(200, json=page([movie(550, vote_average=8.4), movie(13, vote_average=7.5, genre_ids=[10749])]))
            return httpx.Response(200, json=page([movie(550, title="dup"), movie(7, vote_average=6.0, genre_ids=[37])]))

        fake = FakeTMDB({"discover/movie": discover})
        recommender = HeuristicMoodRecommender(CandidateFetcher(fake.client()))
        result = await recommender.recommend("I want to cry tonight")

        self.assertEqual([m.id for m in result.movies], [550, 13, 7])
        self.assertEqual(result.movies[0].reason, ACCLAIMED_REASON)
        self.assertEqual(result.movies[0].title, "Movie 550")
        self.assertEqual(result.movies[1].reason, "This romance gem fits perfectly with what you're looking for.")
        self.assertEqual(result.movies[2].reason, "A highly-rated film that matches your vibe.")
        self.assertIn("cathartic emotional journey", result.explanation)
        self.assertEqual(fake.requests[0].url.params["with_genres"], "18,10749")

    async def test_upstream_outage_is_upstream_error(self):
        fake = FakeTMDB({"discover/movie": (500, {})})
        with self.assertRaises(UpstreamError):
            await HeuristicMoodRecommender(CandidateFetcher(fake.client())).recommend("spooky")

    async def test_one_pool_down_still_answers(self):
        def discover(request):
            if request.url.params["sort_by"] == "vote_average.desc":
                return httpx.Response(503, json={})
            return httpx.Response(200, json=page([movie(694, genre_ids=[27])]))

        fake = FakeTMDB({"discover/movie": discover})
        result = await HeuristicMoodRecommender(CandidateFetcher(fake.client())).recommend("spooky")
        self.assertEqual([m.id for m in result.movies], [694])
        self.assertIn("delightfully creepy", result.explanation)


class TestGenerativeMoodRecommender(unittest.IsolatedAsyncioTestCase):
    def _fetcher(self):
        def search(request):
            query = request.url.params["query"]
            if query == "Nonexistent Film":
                return httpx.Response(200, json=page([]))
            return httpx.Response(200, json=page([movie(sum(map(ord, query)), title=query)]))

        return CandidateFetcher(FakeTMDB({"search/movie": search}).client())

    async def test_reasons_pass_through_in_llm_order(self):
        titles = ["The Notebook", "Nonexistent Film", "Up", "Coco"]
        llm = LLMClient(transport=ollama_transport(generated(titles)))
        result = await GenerativeMoodRecommender(llm, self._fetcher()).recommend("I want to cry")

        self.assertEqual([m.title for m in result.movies], ["The Notebook", "Up", "Coco"])
        self.assertEqual(result.movies[1].reason, "Up will make you cry.")
        self.assertEqual(result.explanation, "A gentle, tearful evening.")

    async def test_prompt_contains_mood_and_schema(self):
        seen = []
        llm = LLMClient(transport=ollama_transport(generated(["Up", "Coco", "Big Fish", "Amelie"]), seen))
        await GenerativeMoodRecommender(llm, self._fetcher()).recommend("  cozy rainy sunday  ")
        body = json.loads(seen[0].content)
        self.assertIn('"cozy rainy sunday"', body["prompt"])
        self.assertIn("picks", body["format"]["properties"])

    async def test_output_violating_schema_is_upstream_error(self):
        llm = LLMClient(transport=ollama_transport(generated(["Only One"])))
        with self.assertRaises(UpstreamError):
            await GenerativeMoodRecommender(llm, self._fetcher()).recommend("sad")

    async def test_every_title_lookup_failing_is_upstream_error(self):
        llm = LLMClient(transport=ollama_transport(generated(["Up", "Coco", "Big Fish", "Amelie"])))
        fetcher = CandidateFetcher(FakeTMDB({"search/movie": (401, {"success": False})}).client())
        with self.assertRaises(UpstreamError):
            await GenerativeMoodRecommender(llm, fetcher).recommend("sad")

    async def test_no_title_found_is_an_empty_answer(self):
        llm = LLMClient(transport=ollama_transport(generated(["Nonexistent Film"] * 4)))
        result = await GenerativeMoodRecommender(llm, self._fetcher()).recommend("sad")
        self.assertEqual(result.movies, [])
        self.assertEqual(result.explanation, "A gentle, tearful evening.")


class TestBuildRecommender(unittest.TestCase):
    def test_strategy_selection(self):
        client = FakeTMDB().client()
        heuristic = build_recommender(client, Settings(mood_match_strategy="heuristic", mood_match_max_results=4))
        self.assertIsInstance(heuristic, HeuristicMoodRecommender)
        self.assertEqual(heuristic.max_results, 4)

        generative = build_recommender(client, Settings(mood_match_strategy="Generative", llm_provider="openai_compatible"))
        self.assertIsInstance(generative, GenerativeMoodRecommender)
        self.assertEqual(generative.llm.provider, "openai_compatible")

        with self.assertRaises(ConfigurationError):
            build_recommender(client, Settings(mood_match_strategy="astrology"))


if __name__ == "__main__":
    unittest.main()
