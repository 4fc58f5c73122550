# lorhammer

Building blocks for orchestrating LoRaWAN load tests. A scenario file
describes one or more test suites; the package parses it, deploys load
generators locally or on remote hosts, provisions sensors through an HTTP
API, starts registered test kinds, queries Prometheus and appends JSON
reports to a file.

## What is inside

| Module | Purpose |
| --- | --- |
| `lorhammer.testsuite` | `from_file` parses a JSON scenario file into `TestSuite` objects, each with a fresh UUID; `TestSuite.to_dict` gives it back as JSON-ready data (durations in nanoseconds). |
| `lorhammer.testtype` | `TestSpec` (type and repeat period), `register_tester` and `start`, which runs the tester in a daemon thread and returns that thread. Only the `none` type is registered out of the box. |
| `lorhammer.deploy` | `DeployModel`, `register_deployer` and `start`, which runs `run_before`, `deploy` and `run_after` of the deployer chosen by type: `none`, `local` or `distant`. |
| `lorhammer.local` | `LocalDeployer`: optionally kills previous `lorhammer` processes, then launches `pathFile -mqtt <address> [-port N]` the configured number of times. |
| `lorhammer.distant` | `DistantDeployer` and `DistantInstance`: copies a file with `scp` and runs the before/after commands with `ssh`, in parallel. |
| `lorhammer.provisioning` | `ProvisioningModel`, `register_provisioner`, and per-UUID `provision`, `deprovision` and `is_provisioned`. Types `none` and `http` are registered. |
| `lorhammer.http_provisioner` | `HttpProvisioner`: posts sensor registrations as JSON to a creation URL, and later to a deletion URL. |
| `lorhammer.promquery` | `PrometheusApiClient.exec_query` runs an instant query against `/api/v1/query` and returns the first sample value, or `0.0`. |
| `lorhammer.metrics` | `OrchestratorMetrics`: counters of MQTT messages ok / failed, rendered in the Prometheus text format by `render`. |
| `lorhammer.report` | `TestReport.write_file` appends the report as JSON indented by 4 spaces, creating the file with mode 0600. |
| `lorhammer.mqtt` | `MqttClient` and `new_mqtt` for talking to an MQTT broker; topic names `MQTT_LORHAMMER_TOPIC` and `MQTT_ORCHESTRATOR_TOPIC`. |
| `lorhammer.duration` | `parse_duration` for durations such as `"1m"`, `"1.5h"` or `"300ms"`. |
| `lorhammer.random_utils` | Random integers, durations and byte strings. |
| `lorhammer.whois` | `hostname`, `free_tcp_port` and `found_ip`. |

## Scenario files

A scenario file is a JSON array of test suites:

```json
[
  {
    "test": {"type": "none", "repeatTime": "0"},
    "stopAllLorhammerTime": "0",
    "sleepBeforeCheckTime": "0",
    "shutdownAllLorhammerTime": "0",
    "sleepAtEndTime": "0",
    "requieredLorhammer": 1,
    "maxWaitLorhammerTime": "10s",
    "init": [{"nsAddress": "127.0.0.1:1700", "nbGateway": 1,
              "nbNodePerGateway": [1, 1], "sleepTime": [100, 500]}],
    "provisioning": {"type": "none"},
    "check": {"type": "none"},
    "deploy": {"type": "local",
               "config": {"pathFile": "./lorhammer", "nbInstanceToLaunch": 2,
                          "cleanPreviousInstances": true}}
  }
]
```

The five top-level duration fields are mandatory, and so is `repeatTime`
when a `test` object is given. Durations take the unit suffixes `ns`, `us`
(or `µs`), `ms`, `s`, `m` and `h`, may be fractional and signed, and a bare
`"0"` means zero; precision below a microsecond is dropped. The `init` and
`check` values are kept as they are read.

## Usage

```python
from lorhammer import deploy
from lorhammer.mqtt import new_mqtt
from lorhammer.testsuite import from_file

with open("scenario.json", "rb") as fh:
    suites = from_file(fh.read())

mqtt_client = new_mqtt("orchestrator", "tcp://localhost:1883")
mqtt_client.connect()

for suite in suites:
    deploy.start(suite.deploy, mqtt_client)
```

`MqttClient.connect` accepts the schemes `tcp`, `mqtt`, `ssl`, `tls`,
`mqtts`, `ws` and `wss`.

Custom deployers, provisioners and test kinds are added at run time with
`deploy.register_deployer`, `provisioning.register_provisioner` and
`testtype.register_tester`.

## Errors

Failures are raised: `DeployError` for an unknown deployer type,
`ProvisioningError` for an unknown provisioner type or a `deprovision`
without a prior `provision`, `TestTypeError` for an unknown test type,
`DurationError` (a `ValueError`) for a bad duration, `DistantRunError` and
`LocalRunError` gathering every failed command, `requests.HTTPError` for a
non-2xx answer to `HttpProvisioner`, and `ValueError` for malformed JSON.

## What the package does not do

- There is no command-line program; the pieces are used from Python.
- Nothing runs a whole test suite end to end (waiting for load generators,
  stopping, checking and shutting them down); callers drive the steps.
- The `oneShot` and `repeat` test kinds are not included, and there are no
  result checkers: the `check` section of a suite is only stored.
- `OrchestratorMetrics.render` produces the metrics text but no HTTP server
  exposes it.
- Only the `none`, `local` and `distant` deployers and the `none` and `http`
  provisioners exist.

## Running the tests

The tests use pytest and responses, available through the `test` extra.