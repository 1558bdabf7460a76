"""
Leaderboard projection tests for EcoChain Hub
"""
import json

from ecochain.services import leaderboard


class TestLeaderboard:

    def test_top_recyclers(self, client, user_factory):
        for points in (5, 50, 20):
            user_factory(role='citizen', eco_points=points)
        user_factory(role='collector')

        response = client.get('/api/leaderboard/recyclers')

        assert response.status_code == 200
        rows = json.loads(response.data)['leaderboard']
        assert [r['eco_points'] for r in rows] == [50, 20, 5]
        assert [r['rank'] for r in rows] == [1, 2, 3]

    def test_recyclers_capped_at_ten(self, user_factory):
        for points in range(12):
            user_factory(role='citizen', eco_points=points)

        rows = leaderboard.get_top_recyclers()

        assert len(rows) == 10
        assert rows[0]['eco_points'] == 11

    def test_top_collectors(self, client, user_factory):
        user_factory(role='collector', total_collections=3, rating=4.5)
        user_factory(role='collector', total_collections=7, name=None)

        rows = json.loads(client.get('/api/leaderboard/collectors').data)['leaderboard']

        assert [r['total_collections'] for r in rows] == [7, 3]
        assert rows[0]['name'] == 'Anonymous'
        assert rows[1]['rating'] == 4.5
