# manifesto

Building blocks for multi-tenant back-end services. It uses only the
standard library.

## What is inside

- `manifesto.kernel.ids`: `UserID` and `TenantID` are string types with
  `is_empty()`. It also has the small value types `Email`, `Phone`,
  `FirstName` and `LastName`.
- `manifesto.kernel.context`: `AuthContext` is the identity that travels with a
  request. `is_valid()` needs a tenant. It also needs a user unless
  `is_api_key` is set. The scope checks are `has_scope`, `has_any_scope`,
  `has_all_scopes` and `is_admin`. Each accepts an exact scope, the global
  wildcard `*`, or a prefix wildcard such as `channels:*`. The matching rule on
  its own is `scope_matches(granted, scope)`. `ContextKey` names the keys for
  request-scoped values.
- `manifesto.kernel.store`: `Paginated`, `Page` and `PaginationOptions`.
  `new_paginated(items, page, size, total)` works out the number of pages.
  `has_next()` and `has_previous()` report the neighbouring pages.
- `manifesto.ptrx`: helpers for optional values. They are `value`,
  `value_or`, `values_or` (for a list or a mapping), `is_nil` and
  `is_not_nil`.
- `manifesto.logx`: a levelled logger.
  - `levels` has `Level` and `parse_level`.
  - `config` has `Config`, `Format`, `default_config` and `load_from_env`.
  - `formatter` has `LogEntry`, `Formatter`, `format_timestamp`,
    `pretty_json` and `compact_json`.
  - `console` has `ConsoleFormatter`, for coloured or plain lines.
  - `json_formatter` has `JSONFormatter` and `CloudWatchFormatter`.
  - `logger` has `Logger` and the chainable `Entry`.
  - `api` has module-level functions that use a replaceable default logger.
- `manifesto.iam`:
  - `errors` has `DomainError`, `ErrorType` and `ErrorRegistry`.
  - `tenant` has the `Tenant` entity, its DTOs, the `TenantRepository` and
    `TenantConfigRepository` contracts, and the `err_*` helpers.
  - `user` has the `User` entity with scope management, its DTOs, and the
    `UserRepository` and `PasswordService` contracts.
  - `tenant_service` has `TenantService`.

## Installation

```
pip install .
```

## Examples

Checking scopes:

```python
from manifesto.kernel.context import AuthContext
from manifesto.kernel.ids import TenantID, UserID

ctx = AuthContext(
    user_id=UserID("u-1"),
    tenant_id=TenantID("t-1"),
    email="someone@example.com",
    scopes=["channels:*"],
)
assert ctx.is_valid()
assert ctx.has_scope("channels:read")
assert not ctx.is_admin()
```

Paginating results:

```python
from manifesto.kernel.store import new_paginated

page = new_paginated(["a", "b"], page=1, size=2, total=5)
assert page.page.pages == 3
assert page.has_next()
```

### Logging

The default logger reads its settings from the environment when
`manifesto.logx.api` is first imported. It reads these variables:

- `LOG_LEVEL` takes `TRACE`, `DEBUG`, `INFO`, `WARN`/`WARNING`, `ERROR`,
  `FATAL` or `OFF`. Unknown values give `INFO`.
- `LOG_FORMAT` takes `console`, `json` or `cloudwatch`.
- `LOG_COLOR` and `LOG_CALLER` are switched on by `true` or `1`.
- `LOG_TIME_FORMAT` takes `RFC3339`, `RFC3339NANO`, `RFC822`, `UNIX`,
  `UNIXMILLI` or a `strftime` pattern.

```python
from manifesto.logx import api as log

log.info("service started")
log.with_field("tenant", "t-1").warn("quota at %d%%", 90)
```

Messages take `%`-style arguments.

`fatal` logs the message and then calls the logger's exit function, which is
`sys.exit(1)` by default. `panic` logs at ERROR and then raises
`RuntimeError`.

You can build your own logger:

```python
import io
from manifesto.logx.config import Config, Format
from manifesto.logx.levels import Level
from manifesto.logx.logger import Logger

stream = io.StringIO()
logger = Logger(Config(level=Level.DEBUG, format=Format.JSON, output=stream))
logger.with_fields({"request": "r-1"}).debug("handled")
```

### Managing tenants

```python
from manifesto.iam.tenant import CreateTenantRequest, SubscriptionPlan
from manifesto.iam.tenant_service import TenantService

service = TenantService(tenant_repo, tenant_config_repo, user_repo)
tenant = service.create_tenant(
    CreateTenantRequest(company_name="Acme", subscription_plan=SubscriptionPlan.BASIC)
)
```

A tenant created without a plan starts a 30-day trial. A tenant created with
any other plan starts active, with a subscription that ends one year later.
The user limit depends on the plan:

| Plan | Users |
| --- | --- |
| trial | 5 |
| basic | 5 |
| professional | 50 |
| enterprise | 500 |

Domain failures raise `manifesto.iam.errors.DomainError`. Each one carries:

- a code, such as `TENANT_NOT_FOUND` or `USER_INVALID_STATUS`;
- an `ErrorType`;
- an HTTP status;
- a `details` dict.

## What it does not do

- **No storage.** The repository and password-service classes are abstract
  contracts only. To use `TenantService` you supply implementations of
  `TenantRepository`, `TenantConfigRepository` and `UserRepository`, for
  example backed by a database or held in memory.
- **No user service.** There is no service for user operations. The `User`
  entity and its request and response types are provided, but nothing creates,
  updates or deletes users through a repository. Likewise, there is no
  catalogue of valid scopes or scope templates.
- **No server or command line.** The package offers no HTTP server, no request
  handlers and no command-line program.

## Running the tests

```
pip install ".[test]"
pytest
```