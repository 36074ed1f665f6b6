# goster

A small HTTP service that registers users, logs them in and issues signed
JWT tokens. Users are stored in a SQL database through SQLAlchemy and their
passwords are hashed with bcrypt.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

SQLite works without anything further. For another database, install the
SQLAlchemy driver it needs (for PostgreSQL, for example, a psycopg package);
it is not a dependency of this package.

## Configuration

The service reads its settings from the environment:

| Variable    | Required | Meaning                                   |
|-------------|----------|-------------------------------------------|
| `JWT`       | yes      | Secret used to sign and verify tokens     |
| `DB_URI`    | yes      | Database URI understood by SQLAlchemy     |
| `LOG_LEVEL` | no       | Log level; default `info`                 |

Recognised log levels are `panic`, `fatal`, `error`, `warn`, `warning`,
`info`, `debug` and `trace`; any other value means `info`.

Logs go to standard output as one JSON object per line with the fields
`time`, `level` and `message`, plus `function` naming the part of the
program that wrote the entry.

## Running

```
JWT=secret DB_URI=sqlite:///goster.db goster
```

Options:

- `--host` — address to bind, default `0.0.0.0`
- `--port` — port to listen on, default `8080`

If `JWT` or `DB_URI` is missing, the command prints the problem to standard
error and exits with status 1. It does the same, after logging the error,
if the database cannot be reached or prepared. On start it creates the
`users` table if it does not exist (on PostgreSQL it also tries to enable
the `pgcrypto` extension). For databases other than SQLite the connection
pool holds up to 25 connections, recycled after an hour.

The application is served by Flask's built-in server.

## HTTP API

| Method | Path            | Purpose                                  |
|--------|-----------------|------------------------------------------|
| GET    | `/_info`        | Health check, returns `{"status": "ok"}` |
| POST   | `/api/register` | Create a user                            |
| POST   | `/api/login`    | Exchange credentials for a token         |

### Register

```
POST /api/register
{"email": "alice@example.com", "password": "password", "role": "user"}
```

`email` must be a valid address, `password` at least 6 characters long, and
`role`, if given, either `admin` or `user` (default `user`). On success the
response is `201` with `id`, `email` and `role`. A body that is empty, not
JSON, or fails these rules gives `400` with an `error` message describing
the problem; a repeated e-mail gives `400` with
`{"error": "email already registered"}`.

### Login

```
POST /api/login
{"email": "alice@example.com", "password": "password"}
```

On success the response is `200` with a `token` valid for 24 hours and the
`user` object (`id`, `email`, `role`). A malformed body gives `400`; wrong
credentials give `401` with `{"error": "invalid credentials"}`.

### CORS

A request that carries an `Origin` header gets
`Access-Control-Allow-Origin: *` and `Access-Control-Allow-Credentials: true`
in the response. An `OPTIONS` preflight with an `Origin` header is answered
with `204`, allowing the methods `GET, POST, PUT, PATCH, DELETE, OPTIONS`
and the headers `Content-Type, Authorization`.

## Using the pieces in code

```python
from sqlalchemy.orm import sessionmaker

from goster.config import load_settings
from goster.database import auto_migrate, connect
from goster.repository import UserRepository
from goster.service import UserService
from goster.transactions import transaction_factory
from goster.web import create_app

settings = load_settings({"JWT": "secret", "DB_URI": "sqlite://"})
engine = connect(settings.db_uri)
auto_migrate(engine)

sessions = sessionmaker(bind=engine)
service = UserService(UserRepository(sessions), transaction_factory(sessions))
app = create_app(service, settings.jwt_secret)
```

- `goster.config.load_settings(environ)` returns a `Settings` with
  `jwt_secret`, `db_uri` and `log_level`, or raises `ConfigError`.
- `goster.logging_setup.configure_logging(level, stream)` and
  `get_logger(function)` set up and use the JSON logging described above.
- `goster.domain.User` is the SQLAlchemy model; `Role` holds `admin` and
  `user`. `User.set_password()` raises `DomainError` for an empty password
  or one longer than 72 bytes; `User.check_password()` returns a bool.
- `goster.service.UserService` offers `register(RegisterRequest(...))` and
  `login(email, password)`; both raise `ServiceError` when refused.
- `goster.transactions.with_transaction(session_factory)` returns a
  `TransactionContext`. Used as a context manager it makes its session the
  active one, so that `UserRepository` and nested `with_transaction` calls
  join it; it is rolled back on exit unless `commit()` was called.
  `get_transaction()` returns the active session or raises
  `TransactionError`.

### Tokens

`goster.tokens.generate_token(user_id, is_admin, hours, secret)` issues an
HS256 token with the claims `id`, `isAdmin`, `iss` (`Goster`), `iat` and
`exp`; a non-positive `hours` means 4. `goster.tokens.validate_token(token,
secret)` accepts HS256, HS384 and HS512 tokens and returns a `Claims`
object (its `user_id()` gives a `UUID`); it raises `TokenError` when the
token is malformed, wrongly signed or expired.

### Protecting routes

`goster.auth` provides view decorators for Flask:
`require_auth(secret, admin_required)`, `require_user(secret)` and
`admin_auth_required(secret)`. They expect an
`Authorization: Bearer <token>` header and answer `401` when it is missing,
malformed or invalid. `admin_auth_required` (and `require_auth` with
`admin_required=True`) answers `403` for non-admin users; `require_user`
answers `403` for admins. On success `flask.g.user_id` and `flask.g.is_admin`
are set for the view.

## What it does not do

The service has only the three routes above. None of them uses the auth
decorators, and there are no routes to read, change or delete users, to
refresh tokens or to spend the `tokens` balance kept on each user. There
is no schema migration beyond creating missing tables.