"""
Canned wiki pages shared by the tests.
"""


SMITE1_LIST_HTML = """
<html><body>
<table>
  <tr><th>Icon</th><th>Name</th><th>Pantheon</th><th>Attack</th><th>Power</th><th>Class</th>
      <th>x</th><th>x</th><th>x</th><th>Release</th></tr>
  <tr><td></td><td><a href="/wiki/Zeus">Zeus</a></td><td>Greek</td><td>Ranged</td><td>Magical</td>
      <td>Mage</td><td></td><td></td><td></td><td>May 31, 2012</td></tr>
  <tr><td></td><td><a href="/wiki/Thor">Thor</a></td><td>Norse</td><td>Melee</td><td>Physical</td>
      <td>Assassin</td><td></td><td></td><td></td><td>January 5th, 2013</td></tr>
  <tr><td></td><td><a href="/wiki/Ah_Muzen_Cab">Ah Muzen Cab</a></td><td>Maya</td><td>Ranged</td>
      <td>Physical</td><td>Hunter</td><td></td><td></td><td></td><td>Missing</td></tr>
  <tr><td></td><td><a href="/wiki/Patch">Patch 1.0</a></td><td>News</td><td></td><td></td>
      <td>Update</td><td></td><td></td><td></td><td></td></tr>
</table>
</body></html>
"""

SMITE2_GODS_HTML = """
<html><body>
<a href="/w/Main_Page">Main Page</a>
<a href="/w/Zeus">Zeus</a>
<a href="/w/Hera">Hera</a>
<a href="/w/Baldur">Baldur</a>
<a href="/w/Zeus">Zeus</a>
<a href="/w/Patch_notes_update">Patch notes</a>
<a href="/w/File:Thing.png">file</a>
<a href="/w/Ra">Ra</a>
</body></html>
"""


def smite2_god_page(pantheon="Greek", roles="Mid", release="May 2nd, 2024", categories=None):
    cats = ""
    if categories:
        cats = '<script>RLCONF={"wgCategories":[%s]};</script>' % ",".join(f'"{c}"' for c in categories)
    rows = ""
    if pantheon:
        rows += f"<tr><th>Pantheon:</th><td>{pantheon}</td></tr>"
    if roles:
        rows += f"<tr><th>Roles:</th><td>{roles}</td></tr>"
    if release:
        rows += f"<tr><th>Release date:</th><td>{release}</td></tr>"
    return f"""<html><head>{cats}</head><body>
<table class="infobox"><tr><td colspan="2"><img src="/images/thumb/T_GodS2_Default.png/250px-T_GodS2_Default.png"></td></tr>
{rows}</table></body></html>"""


