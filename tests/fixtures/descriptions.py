"""Listing description fixtures as agents paste them."""

WHATSAPP_HOUSE = """Dijual Rumah Siap Huni Citraland
LT 120 LB 90
KT 3+1 KM 2
SHM, Hadap Utara
Harga: Rp 1.725 M nego"""

LONG_FORM_HOUSE = """Rumah minimalis di Malang
Luas Tanah: 100 m2, Luas Bangunan: 70 m2
2 Kamar Tidur, 1 Kamar Mandi
Harga Rp. 850.000.000"""

LAND_PLOT = """Kavling siap bangun Rungkut
LT. 300
Harga : 2,5 Miliar"""

NO_NUMBERS = "Rumah bagus, hubungi agen untuk detail."
