import unittest

import httpx

from cinemood.core.exceptions import ConfigurationError, UpstreamError
from cinemood.services.rate_limit import is_transient
from cinemood.services.tmdb_client import TMDBClient
from fakes import FakeTMDB, movie, page


class TestTMDBClient(unittest.IsolatedAsyncioTestCase):
    def test_missing_api_key_is_configuration_error(self):
        for key in (None, ""):
            with self.subTest(key=key):
                with self.assertRaises(ConfigurationError):
                    TMDBClient(key)

    async def test_discover_sends_genre_and_vote_filters(self):
        fake = FakeTMDB({"discover/movie": page([movie(1)])})
        data = await fake.client().discover_movies([18, 10749], sort_by="vote_average.desc", min_vote_count=1000)

        self.assertEqual(data["results"][0]["id"], 1)
        params = fake.requests[0].url.params
        self.assertEqual(params["with_genres"], "18,10749")
        self.assertEqual(params["sort_by"], "vote_average.desc")
        self.assertEqual(params["vote_count.gte"], "1000")
        self.assertEqual(params["api_key"], "test-key")
        self.assertEqual(params["language"], "en-US")

    async def test_unknown_list_category_falls_back_to_popular(self):
        fake = FakeTMDB({"movie/popular": page([]), "tv/popular": page([]), "tv/airing_today": page([])})
        client = fake.client()
        await client.list_movies("bogus", 2)
        await client.list_tv("bogus")
        await client.list_tv("airing_today")
        self.assertEqual(fake.paths(), ["movie/popular", "tv/popular", "tv/airing_today"])
        self.assertEqual(fake.requests[0].url.params["page"], "2")

    async def test_tv_credits_use_aggregate_credits(self):
        fake = FakeTMDB({
            "tv/1399/aggregate_credits": {"cast": [{"name": "Emilia Clarke"}]},
            "movie/550/credits": {"cast": [{"name": "Brad Pitt"}]},
        })
        client = fake.client()
        self.assertEqual(await client.get_credits("tv", 1399), [{"name": "Emilia Clarke"}])
        self.assertEqual(await client.get_credits("movie", 550), [{"name": "Brad Pitt"}])

    async def test_videos_default_to_empty_list(self):
        fake = FakeTMDB({"movie/550/videos": {"id": 550}})
        self.assertEqual(await fake.client().get_videos("movie", 550), [])

    async def test_rejects_unknown_media_type(self):
        with self.assertRaises(ValueError):
            await FakeTMDB().client().get_details("person", 1)

    async def test_http_error_becomes_upstream_error_without_key(self):
        fake = FakeTMDB({"movie/1": (401, {"success": False, "status_message": "Invalid API key"})})
        with self.assertRaises(UpstreamError) as ctx:
            await fake.client().get_details("movie", 1)
        self.assertIn("401", ctx.exception.details)
        self.assertNotIn("test-key", ctx.exception.details)
        self.assertEqual(ctx.exception.operation, "movie_details")

    async def test_non_json_body_is_upstream_error(self):
        fake = FakeTMDB({"search/movie": (200, "<html>proxy error</html>")})
        with self.assertRaises(UpstreamError):
            await fake.client().search_movies("alien")

    async def test_error_envelope_is_upstream_error(self):
        fake = FakeTMDB({"search/movie": {"success": False, "status_code": 7, "status_message": "Invalid API key"}})
        with self.assertRaises(UpstreamError) as ctx:
            await fake.client().search_movies("alien")
        self.assertEqual(ctx.exception.details, "Invalid API key")

    async def test_retries_transient_failures(self):
        attempts = []

        def flaky(request):
            attempts.append(request)
            if len(attempts) < 3:
                return httpx.Response(503, json={"status_message": "busy"})
            return httpx.Response(200, json=page([movie(1)]))

        fake = FakeTMDB({"movie/popular": flaky})
        data = await fake.client(max_retries=3).list_movies("popular")
        self.assertEqual(len(attempts), 3)
        self.assertEqual(data["results"][0]["id"], 1)

    async def test_retry_budget_is_bounded(self):
        fake = FakeTMDB({"movie/popular": (429, {"status_message": "slow down"})})
        with self.assertRaises(UpstreamError):
            await fake.client(max_retries=2).list_movies("popular")
        self.assertEqual(len(fake.requests), 2)

    async def test_client_errors_are_not_retried(self):
        fake = FakeTMDB()
        with self.assertRaises(UpstreamError):
            await fake.client(max_retries=3).get_details("movie", 404)
        self.assertEqual(len(fake.requests), 1)

    async def test_transport_error_becomes_upstream_error(self):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake = FakeTMDB({"movie/popular": boom})
        with self.assertRaises(UpstreamError):
            await fake.client(max_retries=2).list_movies("popular")
        self.assertEqual(len(fake.requests), 2)


class TestTransientClassifier(unittest.TestCase):
    def _status_error(self, status):
        request = httpx.Request("GET", "https://api.themoviedb.org/3/movie/1")
        response = httpx.Response(status, request=request)
        return httpx.HTTPStatusError("error", request=request, response=response)

    def test_classification(self):
        self.assertTrue(is_transient(self._status_error(429)))
        self.assertTrue(is_transient(self._status_error(502)))
        self.assertFalse(is_transient(self._status_error(404)))
        self.assertTrue(is_transient(httpx.ReadTimeout("timed out")))
        self.assertFalse(is_transient(ValueError("bad")))


if __name__ == "__main__":
    unittest.main()
