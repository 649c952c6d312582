# Aether: air quality and route analytics for mapping front ends
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Built-in catalogue of Spanish cities and provinces.

City keys match the WAQI city feed identifiers. Province coordinates are
those of the provincial capital, which is also the feed queried for the
province.
"""

from .registry import lookup_location, register_location  # noqa: F401

# (key, name, latitude, longitude)
CITIES = (
    ("madrid", "Madrid", 40.4168, -3.7038),
    ("barcelona", "Barcelona", 41.3851, 2.1734),
    ("valencia", "Valencia", 39.4699, -0.3763),
    ("sevilla", "Sevilla", 37.3891, -5.9845),
    ("bilbao", "Bilbao", 43.2627, -2.9253),
    ("zaragoza", "Zaragoza", 41.6488, -0.8891),
    ("malaga", "Málaga", 36.7213, -4.4214),
    ("murcia", "Murcia", 37.9922, -1.1307),
    ("palma", "Palma", 39.5696, 2.6502),
    ("las-palmas", "Las Palmas", 28.1248, -15.4300),
    ("alicante", "Alicante", 38.3452, -0.4810),
    ("cordoba", "Córdoba", 37.8847, -4.7791),
    ("valladolid", "Valladolid", 41.6523, -4.7245),
    ("vigo", "Vigo", 42.2406, -8.7207),
    ("gijon", "Gijón", 43.5453, -5.6619),
    ("hospitalet", "L'Hospitalet", 41.3596, 2.1004),
    ("granada", "Granada", 37.1773, -3.5986),
    ("donostia", "San Sebastián", 43.3183, -1.9812),
)

# (key, name, feed city id, latitude, longitude)
PROVINCES = (
    ("a-coruna", "A Coruña", "a-coruna", 43.3623, -8.4115),
    ("alava", "Álava", "vitoria-gasteiz", 42.8467, -2.6716),
    ("albacete", "Albacete", "albacete", 38.9943, -1.8585),
    ("alicante", "Alicante", "alicante", 38.3452, -0.4810),
    ("almeria", "Almería", "almeria", 36.8340, -2.4637),
    ("asturias", "Asturias", "oviedo", 43.3614, -5.8494),
    ("avila", "Ávila", "avila", 40.6565, -4.6818),
    ("badajoz", "Badajoz", "badajoz", 38.8794, -6.9707),
    ("baleares", "Illes Balears", "palma", 39.5696, 2.6502),
    ("barcelona", "Barcelona", "barcelona", 41.3851, 2.1734),
    ("bizkaia", "Bizkaia", "bilbao", 43.2627, -2.9253),
    ("burgos", "Burgos", "burgos", 42.3439, -3.6969),
    ("caceres", "Cáceres", "caceres", 39.4753, -6.3724),
    ("cadiz", "Cádiz", "cadiz", 36.5271, -6.2886),
    ("cantabria", "Cantabria", "santander", 43.4623, -3.8099),
    ("castellon", "Castellón", "castellon", 39.9864, -0.0513),
    ("ciudad-real", "Ciudad Real", "ciudad-real", 38.9848, -3.9274),
    ("cordoba", "Córdoba", "cordoba", 37.8847, -4.7791),
    ("cuenca", "Cuenca", "cuenca", 40.0704, -2.1374),
    ("gipuzkoa", "Gipuzkoa", "donostia", 43.3183, -1.9812),
    ("girona", "Girona", "girona", 41.9794, 2.8214),
    ("granada", "Granada", "granada", 37.1773, -3.5986),
    ("guadalajara", "Guadalajara", "guadalajara", 40.6330, -3.1672),
    ("huelva", "Huelva", "huelva", 37.2614, -6.9447),
    ("huesca", "Huesca", "huesca", 42.1401, -0.4089),
    ("jaen", "Jaén", "jaen", 37.7796, -3.7849),
    ("la-rioja", "La Rioja", "logrono", 42.4627, -2.4450),
    ("las-palmas", "Las Palmas", "las-palmas", 28.1248, -15.4300),
    ("leon", "León", "leon", 42.5987, -5.5671),
    ("lleida", "Lleida", "lleida", 41.6176, 0.6200),
    ("lugo", "Lugo", "lugo", 43.0097, -7.5568),
    ("madrid", "Madrid", "madrid", 40.4168, -3.7038),
    ("malaga", "Málaga", "malaga", 36.7213, -4.4214),
    ("murcia", "Murcia", "murcia", 37.9922, -1.1307),
    ("navarra", "Navarra", "pamplona", 42.8125, -1.6458),
    ("ourense", "Ourense", "ourense", 42.3358, -7.8639),
    ("palencia", "Palencia", "palencia", 42.0096, -4.5288),
    ("pontevedra", "Pontevedra", "pontevedra", 42.4310, -8.6444),
    ("salamanca", "Salamanca", "salamanca", 40.9701, -5.6635),
    ("santa-cruz-de-tenerife", "Santa Cruz de Tenerife", "santa-cruz-de-tenerife", 28.4636, -16.2518),
    ("segovia", "Segovia", "segovia", 40.9429, -4.1088),
    ("sevilla", "Sevilla", "sevilla", 37.3891, -5.9845),
    ("soria", "Soria", "soria", 41.7640, -2.4688),
    ("tarragona", "Tarragona", "tarragona", 41.1189, 1.2445),
    ("teruel", "Teruel", "teruel", 40.3457, -1.1065),
    ("toledo", "Toledo", "toledo", 39.8628, -4.0273),
    ("valencia", "Valencia", "valencia", 39.4699, -0.3763),
    ("valladolid", "Valladolid", "valladolid", 41.6523, -4.7245),
    ("zamora", "Zamora", "zamora", 41.5035, -5.7446),
    ("zaragoza", "Zaragoza", "zaragoza", 41.6488, -0.8891),
)

# Feed id queried for each province
PROVINCE_FEEDS = {key: feed for key, _, feed, _, _ in PROVINCES}


def register_builtin_locations() -> None:
    """Register the built-in cities and provinces."""
    for key, name, latitude, longitude in CITIES:
        register_location(
            {
                "key": key,
                "name": name,
                "kind": "city",
                "latitude": latitude,
                "longitude": longitude,
            }
        )
    for key, name, _, latitude, longitude in PROVINCES:
        register_location(
            {
                "key": key,
                "name": name,
                "kind": "province",
                "latitude": latitude,
                "longitude": longitude,
            }
        )


register_builtin_locations()
