# timoni

A Python library for working with Timoni module instances and bundles:
the stored instance data model, runtime attribute and query parsing,
conversion of values files to CUE source, rendering of Kubernetes objects
as YAML or JSON, ownership checks between instances and bundles, and a
few helpers for documentation pages and shell completion.

It depends on PyYAML. Install the `test` extra to run the tests with pytest.

## Modules

### `timoni.api`

Constants and data types of the instance API.

- `Selector`: a string enum of the CUE paths the engine knows about, such
  as `Selector.BUNDLE_NAME` (`"bundle.name"`) or `Selector.APPLY`
  (`"timoni.apply"`). `str()` and formatting give the plain path.
- `Instance`: an installed module with `name`, `namespace`, `labels`,
  `annotations`, `api_version`, `kind`, `module`, `values`,
  `last_transition_time`, `inventory` and `images`.
  `Instance.to_dict()` returns the stored JSON layout (metadata under
  `metadata`, inventory entries as `{"id": ..., "v": ...}`), leaving out
  empty optional fields; `Instance.from_dict(data)` builds an instance back
  from it and raises `TypeError` when `data` is not a mapping.
- `ModuleReference`, `ImageReference`, `ResourceInventory`, `ResourceRef`
  and `ArtifactReference`: plain dataclasses for the referenced module,
  container images, inventory entries and registry artifacts.
- Module-level constants: action annotations (`PRUNE_ACTION`,
  `FORCE_ACTION`, `IF_NOT_PRESENT_ACTION` with `ENABLED_VALUE` /
  `DISABLED_VALUE`), artifact media types and annotation keys,
  `BUNDLE_NAME_LABEL_KEY`, `LATEST_VERSION`, `IGNORE_FILE` with
  `DEFAULT_IGNORE_PATTERNS`, and the CUE schemas `BUNDLE_SCHEMA` and
  `INSTANCE_SCHEMA` as text.

### `timoni.runtime_api`

- `is_runtime_attribute(key, body)` is true for a CUE attribute of the
  form `@timoni(runtime:[TYPE]:[NAME])`, i.e. key `"timoni"` and a body of
  exactly three `:`-separated parts starting with `runtime`.
- `RuntimeAttribute.parse(key, body)` returns a frozen `RuntimeAttribute`
  with `name` and `type`, or raises `ValueError`.
- `RuntimeValue(query, for_, optional)` describes an in-cluster lookup.
  `to_resource_ref()` parses a query such as
  `k8s:v1:Secret:kube-system:my-data` (the namespace may be left out:
  `k8s:v1:Namespace:default`) into a `RuntimeResourceRef` carrying the
  API version, kind, namespace, name, the copied expressions and the
  optional flag. A query not starting with `k8s`, or with fewer than four
  parts, raises `ValueError`.
- `RUNTIME_SCHEMA` holds the runtime CUE schema as text.

### `timoni.ownership`

`instance_ownership_conflicts(instance)` raises `OwnershipConflictError`
when the instance carries a `bundle.timoni.sh/name` label, naming the
instance and the owning bundle.

### `timoni.bundles`

- `BundleInstance`: an instance declared in a bundle (`bundle`, `name`,
  `namespace`, `module`, `values`).
- `bundle_instances_ownership_conflicts(instances, lookup)` calls
  `lookup(name, namespace)` for every instance; it should return the stored
  `Instance` or `None` (a raised `LookupError` also counts as absent). An
  existing instance that belongs to no bundle, or to a different bundle,
  is a conflict; all conflicts are reported together in one
  `OwnershipConflictError`.
- `resolve_module_version(module)` returns `"@" + digest` when the version
  is `latest` and a digest is pinned, otherwise the version.
- `verify_module_digest(instance, fetched)` raises `DigestMismatchError`
  when the instance pins a digest other than the fetched one; otherwise it
  stores `fetched` on the instance and returns it.
- `save_reader_to_file(reader)` copies a text or binary stream into a new
  temporary `.cue` file and returns its path. The caller removes the file.

### `timoni.values`

- `convert_to_cue(paths, stdin=None)` reads each values file in order and
  returns a list of CUE sources as bytes. `.cue` files are passed through
  unchanged, `.json`, `.yaml` and `.yml` files are decoded and re-encoded
  as CUE, and the path `-` reads CUE from `stdin` (or the process's
  standard input). Other extensions, and content that cannot be expressed
  in CUE, raise `ValuesFormatError`; unreadable files raise `OSError`.
- `encode_cue(value)` turns a decoded JSON/YAML value into CUE source: a
  mapping becomes top-level fields, with labels quoted where they are not
  plain identifiers or would read as CUE keywords.

### `timoni.render`

- `render_objects(objects, output)` renders with `"yaml"` or `"json"`;
  any other format raises `OutputFormatError`.
- `render_yaml(objects)` writes each object (keys sorted) followed by a
  `---` line.
- `render_json_list(objects)` wraps the objects in a `v1` `List`, indented
  by four spaces, with `<`, `>` and `&` escaped as `\u003c`, `\u003e`,
  `\u0026`; `items` is left out when there are no objects.
- `sort_objects(objects)` orders objects for applying: CRDs, namespaces,
  classes, RBAC, config maps, secrets, services and so on first, other
  kinds after, then by namespace and name.
- `render_bundle(instances)` takes a mapping of instance names to objects
  (or a sequence of `(name, objects)` pairs) and writes each instance
  under a `# Instance: <name>` header, its objects sorted and separated by
  `---`.

### `timoni.docgen`

`frontmatter_prepender(filename)` returns the front matter for a generated
command page, titled after the file name with underscores as spaces;
`link_handler(name)` returns the lower-case `.md` link target.

### `timoni.completion`

`complete_prefix(candidates, to_complete)` keeps the candidates that start
with the given prefix, in their original order.

## Examples

```python
from timoni.completion import complete_prefix
from timoni.docgen import link_handler
from timoni.runtime_api import RuntimeAttribute, RuntimeValue, is_runtime_attribute

is_runtime_attribute("timoni", "runtime:string:DOMAIN")   # True
attr = RuntimeAttribute.parse("timoni", "runtime:bool:ENABLED")
attr.type, attr.name                                       # ("bool", "ENABLED")

ref = RuntimeValue(
    query="k8s:v1:Secret:kube-system:my-data",
    for_={"DOMAIN": "obj.data.domain"},
).to_resource_ref()
ref.kind, ref.namespace, ref.name                          # ("Secret", "kube-system", "my-data")

complete_prefix(["frontend", "backend"], "fr")             # ["frontend"]
link_handler("Timoni_Apply.md")                            # "timoni_apply.md"
```

Converting values files and rendering objects built elsewhere:

```python
from timoni.render import render_objects
from timoni.values import convert_to_cue

sources = convert_to_cue(["values.yaml", "overrides.cue"])  # list of bytes

objects = [
    {"apiVersion": "v1", "kind": "ConfigMap",
     "metadata": {"name": "app-client", "namespace": "apps"},
     "data": {"server": "tcp://example.internal"}},
]
print(render_objects(objects, "yaml"))
```

## What this package does not do

This is a library only; it installs no command-line program. It does not
evaluate CUE, so it cannot build a module or a bundle itself: it converts
values to CUE source and renders objects that were produced elsewhere. It
does not talk to a Kubernetes cluster (no applying, deleting, waiting,
status or stored-instance lookups — ownership checks take a `lookup`
callable you supply) and it does not pull from or push to container
registries.