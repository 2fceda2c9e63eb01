# dump.py: Human readable and JSON-friendly views of a parsed DFU file

from typing import *

import jinja2

from .parse import DfuFile

default_template = """\
{{ file }} file
Suffix:
  Device version:  0x{{ "%04X"|format(file.suffix.device_bcd) }}
  Product id:      0x{{ "%04X"|format(file.suffix.product_id) }}
  Vendor id:       0x{{ "%04X"|format(file.suffix.vendor_id) }}
  DFU version:     0x{{ "%04X"|format(file.suffix.dfu_spec_bcd) }}
  CRC:             0x{{ "%08X"|format(file.suffix.checksum) }}
{% if calculated_crc is not none %}
  Calculated CRC:  0x{{ "%08X"|format(calculated_crc) }}
{% endif %}
{% if file.kind == "Plain" %}
Payload: {{ file.payload|length }} bytes
{% else %}
Prefix:
  Format version:  {{ file.prefix.format_version }}
  Total size:      {{ file.prefix.total_size }} bytes
  Targets:         {{ file.prefix.target_count }}
{% for target in file.targets %}
Target {{ loop.index0 }}:
  Alternate setting: {{ target.alternate_setting }}
  Name:              {{ target.name if target.has_name else "(unnamed)" }}
  Size:              {{ target.target_size }} bytes
  Elements:          {{ target.element_count }}
{% for element in target.elements %}
  Element {{ loop.index0 }}: 0x{{ "%08X"|format(element.address) }}-0x{{ "%08X"|format(element.end_address) }} ({{ element.size }} bytes)
{% endfor %}
{% endfor %}
{% endif %}
"""

def _environment():
    return jinja2.Environment(loader=jinja2.BaseLoader, trim_blocks=True, lstrip_blocks=True)

def render(file : DfuFile, calculated_crc : Optional[int] = None,
           template : Optional[str] = None) -> str:
    """Returns a text description of <file>. <calculated_crc>, if set, is
       printed next to the stored CRC. <template> is the source of a jinja2
       template replacing the default one. It is rendered with the
       variables 'file' and 'calculated_crc'.
    """
    compiled = _environment().from_string(template if template is not None else default_template)
    return compiled.render(file=file, calculated_crc=calculated_crc)

def metadata(file : DfuFile) -> Dict[str, Any]:
    "JSON-serializable description of <file>, without the firmware data"
    suffix = file.suffix
    info : Dict[str, Any] = {
        'kind': file.kind,
        'suffix': {'device_bcd': suffix.device_bcd,
                   'product_id': suffix.product_id,
                   'vendor_id': suffix.vendor_id,
                   'dfu_spec_bcd': suffix.dfu_spec_bcd,
                   'checksum': suffix.checksum}}
    if file.kind == "Plain":
        info['payload_size'] = len(file.payload)
        return info
    info['prefix'] = {'format_version': file.prefix.format_version,
                      'total_size': file.prefix.total_size,
                      'target_count': file.prefix.target_count}
    info['targets'] = [{'alternate_setting': t.alternate_setting,
                        'name': t.name if t.has_name else None,
                        'target_size': t.target_size,
                        'elements': [{'address': e.address, 'size': e.size, 'offset': e.offset}
                                     for e in t.elements]}
                       for t in file.targets]
    return info

def element_filename(target_ix : int, element_ix : int, address : int) -> str:
    return "target%d_element%d_0x%08X.bin" % (target_ix, element_ix, address)
