"""
Process-level plumbing shared by the feature packages: the asyncpg pool and
its environment settings (`db`), and root logger setup (`log`).

Post SQL, the snapshot cache and HTTP error mapping live in `posts/`.
"""
