# cmdbservice

The HTTP layer of a configuration management database (CMDB). It is built
on Flask. It serves JSON endpoints for the following:

- model groups, models, attribute groups and attributes
- relationship types
- resource instances
- relations between models and between resources
- an LDAP user list

It also serves a small read-only API that returns an application tree
(business → domain → service → cluster).

Storage and business logic live in service objects that you supply. This
package does three things with each request:

1. It parses and validates the request.
2. It calls the matching service method.
3. It wraps the answer in one JSON envelope.

## Response envelope

Every endpoint answers with HTTP status 200 and a body of this shape:

```json
{"data": ..., "msg": "", "code": 200}
```

On failure `code` is `400` and `msg` carries the error text. The builders
in `cmdbservice.responses` produce these bodies as plain dicts:

- `request_ok`
- `request_err`
- `request_data_err`
- `success`
- `error`
- `error_with_data`
- `result_handle`

Some endpoints send data together with a failure message:

- attribute update
- resource add
- resource update

For these, give the exception a `data` attribute and its value is sent back.

A few listings hide service failures:

- The model-group list answers with `data: null`.
- The relationship list answers with `[]`.
- The app tree answers with `data: null`.

## Building the applications

`cmdbservice.server.create_web_app` builds the management application. All
of its routes are mounted under `/cmdb/web`:

```python
from cmdbservice.server import BaseServer, create_web_app

app = create_web_app(
    model_service,
    attribute_service,
    resource_service,
    sync_service,
    relation_service,
    ldap_service,
)
BaseServer("0.0.0.0:8080", app).run()
```

`create_api_app(v1_service)` builds the read-only API. Its one route,
`GET /cmdb/api/v1/app-tree`, returns the result of `v1_service.get_app_tree()`:

```python
from cmdbservice.server import BaseServer, create_api_app

BaseServer("0.0.0.0:8081", create_api_app(v1_service)).run()
```

About `BaseServer`:

- It takes a `host:port` address and serves the application with the
  standard-library WSGI server.
- `run()` blocks until another thread calls `stop()`.
- With port `0` it binds a free port and stores that port in `port`.

You can also attach the route groups to an existing Flask application one
at a time. `cmdbservice.model_api.ModelApi` and the classes in
`cmdbservice.resource_api` (`ResourceApi`, `RelationshipApi`, `LdapApi`)
each have a `register(app)` method.

## Services you supply

Services are plain objects. Each method takes plain arguments, returns the
data to send, and raises an exception to report a failure. The methods
called are listed below.

- **model service**
  - `get_all_model_group()`
  - `get_model_group(uuid)`
  - `create_model_group(vo, user)`
  - `update_model_group(vo, user)`
  - `delete_model_group(uuid)`
  - `get_simple_model_list()`
  - `get_model(uuid)`
  - `create_model(vo, user)`
  - `update_model(vo, user)`
  - `delete_model(uuid, user)`
  - `get_relationship_list(limit, page)`
  - `save_relationship(vo, user)`
  - `update_relationship(vo, user)`
  - `delete_relationship(uuid)`
- **attribute service**
  - `get_attribute_group_list(limit, page)`
  - `get_attribute_group(uuid)`
  - `create_attribute_group(vo, user)`
  - `update_attribute_group(vo, user)`
  - `delete_attribute_group(uuid)`
  - `get_attribute_list(limit, page)`
  - `get_attribute(uuid)`
  - `create_attribute(vo, user)`
  - `update_attribute(vo, user)`
  - `delete_attribute_instance(uuid)`
- **resource service**
  - `get_model_attribute_list(uid)`
  - `set_model_attribute(uid, columns)`
  - `add_resource(body, user)`
  - `update_resource(body, user)`
  - `get_resource_list_page(vo)`
  - `get_resource_list_page_by_query_value(model_uid, value, current, page_size)`
  - `get_resource_detail(uuid)`
  - `delete_resource(uuids)`
  - `update_resource_attribute(uuid, value, user)`
  - `get_model_info_for_ins(uid)`
- **sync service**
  - `sync_button(model_uid, user)`
  - `sync_resource(model_uid, user)`
- **relation service**
  - `add_model_relation(vo, user)`
  - `delete_model_relation(uid)`
  - `get_model_relation_list(uid)`
  - `update_model_relation(vo, user)`
  - `get_resource_relations_by_model_relation_uid(uid)`
  - `get_resource_relation_list(uuid)`
  - `add_resource_relation(source, target, uid)`
  - `delete_resource_relation(source, target, uid)`
- **ldap service**
  - `get_ldap_user_list()`

The `user` argument is the value of the `x-wrapper-username` request header,
or `""` when the header is absent.

## Request objects

`cmdbservice.vo` holds the request and response value objects.

`bind(cls, data)` builds one of them from a JSON object, JSON text or JSON
bytes. Keys are matched by wire name, exactly first and then ignoring case.
`bind` enforces the required-field and length or range rules, and raises
`BindingError` when the body does not fit.

`to_json_dict(vo)` returns the JSON form with the wire field names.

## Application tree and shared values

`cmdbservice.apptree` provides `Business`, `Domain`, `Service` and
`ServiceCluster`. You fill them attribute by attribute with `add_attribute`,
`add_domain`, `add_service` and `add_cluster`, then turn them into JSON with
`to_dict()`.

`cmdbservice.common` holds the following:

- the route prefixes
- the LDAP connection settings
- `attribute_types()`
- `K8sResource`
- `Relation`

## What this package does not do

- It has no storage. Persisting models, attributes, resources and relations
  is up to the services you pass in.
- It does not talk to LDAP or synchronise resources from outside systems by
  itself.
- It installs no command. You start a server from your own code, as shown
  above.